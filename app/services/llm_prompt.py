from __future__ import annotations
from datetime import date
from typing import Optional
from jinja2 import Template

from app.services.intent_rules import REG

# Builds a compact prompt including the query-type glossary and few-shot intents
PROMPT_TMPL = Template("""
You parse sales questions into a structured JSON object.

Extract:
- query_type: one of {{ query_types | map(attribute="key") | join(", ") }}.
- time_filter: the time expression exactly as the user said it (e.g. {{ time_phrases | join(", ") }}, a month name like 'July', a date like '2025-07-21' or 'July 1st'), otherwise null.
- store_name: the store if one is named, otherwise null.
- item_name: the singular item name if one is named, otherwise null.

Query types:
{% for qt in query_types -%}
- {{ qt.key }}: {{ qt.description }}
{% endfor %}
Today is {{ today }}.

Examples:
{% for ex in examples -%}
- "{{ ex.q }}" -> {{ ex.intent | tojson }}
{% endfor %}
Query: "{{ question }}"
Respond with JSON only: {"query_type": "...", "time_filter": ..., "store_name": ..., "item_name": ...}
""")

def build_prompt(question: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    prompt = PROMPT_TMPL.render(
        question=question,
        today=today.isoformat(),
        query_types=REG.query_types,
        time_phrases=[f"'{p}'" for p in REG.time_phrases],
        examples=REG.examples,
    )
    return prompt.strip()
