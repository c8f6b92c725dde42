import json
from datetime import date

import pytest

from app.core.errors import IntentParseError
from app.models.domain import QueryType
from app.services import intent_llm
from app.services.intent_llm import parse_intent, parse_with_llm
from app.services.intent_rules import REG, parse_with_rules
from app.services.llm_prompt import build_prompt


@pytest.mark.parametrize("question,expected", [
    ("What was the total sales yesterday?",
     {"query_type": "total_sales", "time_filter": "yesterday", "store_name": None, "item_name": None}),
    ("What is the sales for Store A in July?",
     {"query_type": "sales_for_store", "time_filter": "July", "store_name": "Store A", "item_name": None}),
    ("Total quantity of mice sold in the past 3 days?",
     {"query_type": "total_quantity", "time_filter": "past 3 days", "store_name": None, "item_name": "mouse"}),
    ("Which store had the highest sales last month?",
     {"query_type": "most_profitable_store", "time_filter": "last month", "store_name": None, "item_name": None}),
    ("Which store made the least profit?",
     {"query_type": "least_profitable_store", "time_filter": None, "store_name": None, "item_name": None}),
    ("Sales for Store B last weekend?",
     {"query_type": "sales_for_store", "time_filter": "last weekend", "store_name": "Store B", "item_name": None}),
    ("How many items were sold on 2025-07-20?",
     {"query_type": "items_sold", "time_filter": "2025-07-20", "store_name": None, "item_name": None}),
    ("What were the sales on July 1st?",
     {"query_type": "total_sales", "time_filter": "July 1st", "store_name": None, "item_name": None}),
    ("What was the average revenue for laptops last week?",
     {"query_type": "average_revenue", "time_filter": "last week", "store_name": None, "item_name": "laptop"}),
    ("What were the total sales in July 2025?",
     {"query_type": "total_sales", "time_filter": "July", "store_name": None, "item_name": None}),
    ("Items sold on 1st August 2025?",
     {"query_type": "items_sold", "time_filter": "1st August", "store_name": None, "item_name": None}),
    ("Tell me a joke",
     {"query_type": "other", "time_filter": None, "store_name": None, "item_name": None}),
])
def test_rules_parser(question, expected):
    assert parse_with_rules(question).to_dict() == expected


def test_rules_parser_ignores_may_as_a_verb():
    assert parse_with_rules("May I see total sales?").time_filter is None
    assert parse_with_rules("total sales in May").time_filter == "May"


def test_vocabulary_is_loaded():
    keys = [qt.key for qt in REG.query_types]
    assert set(keys) == {qt.value for qt in QueryType} - {"other"}
    assert REG.time_phrases[0] in ("last weekend", "this weekend", "current month")
    assert REG.examples


def test_prompt_mentions_question_types_and_examples():
    prompt = build_prompt("Sales for Store B last weekend?", date(2025, 7, 21))
    assert 'Query: "Sales for Store B last weekend?"' in prompt
    assert "Today is 2025-07-21." in prompt
    assert "least_profitable_store" in prompt
    assert '"What was the total sales yesterday?"' in prompt


def test_llm_json_becomes_intent(monkeypatch):
    payload = {"query_type": "items_sold", "time_filter": "today", "store_name": None, "item_name": "mouse"}
    monkeypatch.setattr(intent_llm, "_call_llm", lambda prompt: "```json\n" + json.dumps(payload) + "\n```")
    intent = parse_with_llm("How many mice sold today?", date(2025, 7, 21))
    assert intent.to_dict() == payload


def test_llm_garbage_is_rejected(monkeypatch):
    monkeypatch.setattr(intent_llm, "_call_llm", lambda prompt: "not json")
    assert parse_with_llm("anything") is None
    monkeypatch.setattr(intent_llm, "_call_llm", lambda prompt: "[1, 2]")
    assert parse_with_llm("anything") is None


def test_auto_mode_falls_back_to_rules():
    # no API key in tests
    intent = parse_intent("What was the total sales yesterday?", date(2025, 7, 21))
    assert intent.query_type is QueryType.TOTAL_SALES
    assert intent.time_filter == "yesterday"


def test_llm_mode_raises_without_llm():
    with pytest.raises(IntentParseError):
        parse_intent("What was the total sales yesterday?", mode="llm")


def test_rules_mode_never_calls_llm(monkeypatch):
    def boom(prompt):
        raise AssertionError("LLM called")
    monkeypatch.setattr(intent_llm, "_call_llm", boom)
    assert parse_intent("total sales today", mode="rules").time_filter == "today"
