from __future__ import annotations
import json, logging
from datetime import date
from typing import Optional
from app.core.config import settings
from app.core.errors import IntentParseError
from app.models.domain import QueryIntent
from app.services.llm_prompt import build_prompt
from app.services.intent_rules import parse_with_rules

log = logging.getLogger(__name__)

def _call_llm(prompt: str) -> Optional[str]:
    if not settings.OPENAI_API_KEY:
        log.info("parser=rules reason=no_api_key")
        return None
    try:
        import openai  # openai>=1.0.0
        client = openai.OpenAI(api_key=settings.OPENAI_API_KEY)
        resp = client.chat.completions.create(
            model=settings.LLM_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=0,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
            response_format={"type": "json_object"},
        )
        return resp.choices[0].message.content
    except Exception as e:
        log.warning("parser=rules reason=llm_call_failed err=%s", e)
        return None

def _strip_fences(raw: str) -> str:
    s = raw.strip()
    if s.startswith("```"):
        s = s.strip("`")
        s = s[4:] if s.lower().startswith("json") else s
    return s.strip()

def parse_with_llm(question: str, today: Optional[date] = None) -> Optional[QueryIntent]:
    raw = _call_llm(build_prompt(question, today))
    if not raw:
        return None
    try:
        payload = json.loads(_strip_fences(raw))
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object")
    except ValueError as e:
        log.warning("parser=rules reason=llm_json_invalid err=%s raw=%s", e, str(raw)[:300])
        return None

    intent = QueryIntent.from_payload(payload)
    log.info("parser=llm intent=%s", intent.to_dict())
    return intent

def parse_intent(question: str, today: Optional[date] = None, mode: Optional[str] = None) -> QueryIntent:
    """
    Turn a user question into a QueryIntent.

    mode (default INTENT_PARSER_MODE):
      "auto"  - LLM, falling back to the keyword parser
      "llm"   - LLM only, IntentParseError when it yields nothing
      "rules" - keyword parser only
    """
    mode = (mode or settings.INTENT_PARSER_MODE or "auto").lower()
    if mode != "rules":
        intent = parse_with_llm(question, today)
        if intent is not None:
            return intent
        if mode == "llm":
            raise IntentParseError("LLM returned no usable intent")

    intent = parse_with_rules(question)
    log.info("parser=rules intent=%s", intent.to_dict())
    return intent
