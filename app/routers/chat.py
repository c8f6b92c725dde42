import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException

from app.core.errors import IntentParseError
from app.deps import get_record_store, get_today
from app.models.dto import ChatRequest, ChatResponse
from app.services.dispatcher import answer_query
from app.services.intent_llm import parse_intent
from app.services.records import SqlRecordStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

@router.post("", response_model=ChatResponse)
def chat(req: ChatRequest,
         store: SqlRecordStore = Depends(get_record_store),
         today: date = Depends(get_today)):
    query = (req.query or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query is required.")

    try:
        intent = parse_intent(query, today)
        answer = answer_query(query, intent, today, store.fetch)
    except IntentParseError as e:
        log.error("chat reason=intent_parse_failed err=%s", e)
        raise HTTPException(status_code=500, detail="Could not parse your query. Please try rephrasing.")
    except Exception:
        log.exception("chat reason=unhandled query=%r", query)
        raise HTTPException(status_code=500, detail="An internal server error occurred. Check server logs for details.")

    if not answer.ok:
        # record store failed; message already names what could not be fetched
        raise HTTPException(status_code=500, detail=answer.response)
    return ChatResponse(response=answer.response)
