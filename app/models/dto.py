from pydantic import BaseModel
from typing import Optional

class ChatRequest(BaseModel):
    query: Optional[str] = None  # "What was the total sales yesterday?"

class ChatResponse(BaseModel):
    response: str
