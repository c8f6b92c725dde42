from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///data/sales.db"

    # Intent parser
    INTENT_PARSER_MODE: str = "auto"  # "auto" | "llm" | "rules"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT: int = 12             # seconds
    LLM_MAX_TOKENS: int = 200         # one small JSON object
    OPENAI_API_KEY: str | None = None

    # Response formatting
    CURRENCY_SYMBOL: str = "₹"

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

settings = Settings()
