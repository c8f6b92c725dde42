from __future__ import annotations
import yaml, re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.models.domain import QueryIntent
from app.services.date_range import MONTH_NAMES

# ---------- Load vocabulary ----------
REG_PATH = Path(__file__).resolve().parent.parent / "data" / "intents.yaml"

@dataclass
class QueryTypeDef:
    key: str
    description: str
    synonyms: List[str]

@dataclass
class ItemDef:
    name: str
    synonyms: List[str]

class Registry:
    def __init__(self, path: Path):
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        self.query_types: List[QueryTypeDef] = [
            QueryTypeDef(key=q["key"], description=q.get("description", ""),
                         synonyms=q.get("synonyms", []))
            for q in raw.get("query_types", [])
        ]
        self.default_query_type: str = raw.get("default_query_type", "other")
        # longest first so "last weekend" wins over "last week"
        self.time_phrases: List[str] = sorted(raw.get("time_phrases", []), key=len, reverse=True)
        self.items: List[ItemDef] = [
            ItemDef(name=i["name"], synonyms=i.get("synonyms", [i["name"]]))
            for i in raw.get("items", [])
        ]
        self.examples: List[Dict[str, Any]] = raw.get("examples", [])

REG = Registry(REG_PATH)

# ---------- Slot extraction ----------
ISO_IN_TEXT = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
# day must not run into a year: "July 2025" is a month, not July 20
SPOKEN_MONTH_DAY = re.compile(rf"\b({'|'.join(MONTH_NAMES)})\s+(\d{{1,2}})(?!\d)(?:st|nd|rd|th)?", re.IGNORECASE)
SPOKEN_DAY_MONTH = re.compile(rf"(?<!\d)(\d{{1,2}})(?:st|nd|rd|th)?\s+({'|'.join(MONTH_NAMES)})\b", re.IGNORECASE)
# "may" is also a verb, so a bare month needs a preposition in front of it
MONTH_IN_TEXT = re.compile(rf"\b(?:in|for|during|of)\s+({'|'.join(MONTH_NAMES)})\b", re.IGNORECASE)
STORE_IN_TEXT = re.compile(r"\b[Ss]tore\s+([A-Z]|\d+)\b")

def _has_word(q: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", q) is not None

def _find_query_type(q: str) -> str:
    for qt in REG.query_types:
        if any(_has_word(q, syn) for syn in qt.synonyms):
            return qt.key
    return REG.default_query_type

def _find_time_filter(question: str) -> Optional[str]:
    m = ISO_IN_TEXT.search(question)
    if m:
        return m.group(0)
    m = SPOKEN_MONTH_DAY.search(question) or SPOKEN_DAY_MONTH.search(question)
    if m:
        return m.group(0)
    q = question.lower()
    for phrase in REG.time_phrases:
        if _has_word(q, phrase):
            return phrase
    m = MONTH_IN_TEXT.search(question)
    if m:
        return m.group(1)
    return None

def _find_store(question: str) -> Optional[str]:
    m = STORE_IN_TEXT.search(question)
    return f"Store {m.group(1)}" if m else None

def _find_item(q: str) -> Optional[str]:
    for item in REG.items:
        if any(_has_word(q, syn) for syn in item.synonyms):
            return item.name
    return None

def parse_with_rules(question: str) -> QueryIntent:
    """Keyword fallback for when the LLM is unavailable. Always yields an intent."""
    q = question.lower()
    return QueryIntent.from_payload({
        "query_type": _find_query_type(q),
        "time_filter": _find_time_filter(question),
        "store_name": _find_store(question),
        "item_name": _find_item(q),
    })
