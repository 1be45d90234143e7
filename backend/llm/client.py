"""
LLM client wrapper.
Used only by the assisted formatter, to split concatenated result text into
trademark fields. The client is created lazily so direct mode never needs a
key.
"""
import json
import re
from functools import lru_cache

import anthropic

from config import settings

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


@lru_cache(maxsize=1)
def get_async_client() -> anthropic.AsyncAnthropic:
    return anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)


def build_parse_prompt(raw_text: str) -> str:
    return f"""Parse this trademark data into structured fields. Extract the following information:
- Brand name/mark (just the trademark name, e.g., "NIKE")
- Owner (company name and country)
- Application/Registration number
- Nice classes (comma-separated numbers)
- Country of filing
- Status (Registered/Pending/etc)
- Registration date

Raw data: "{raw_text}"

Return a flat JSON object with fields: mark, owner, applicationNumber, niceClasses, country, status, registrationDate
Return only valid JSON, no other text."""


async def complete_text(prompt: str, max_tokens: int = 400) -> str:
    response = await get_async_client().messages.create(
        model=settings.llm_model,
        max_tokens=max_tokens,
        messages=[{"role": "user", "content": prompt}],
    )
    return "".join(
        block.text for block in response.content if getattr(block, "type", "") == "text"
    )


def extract_json_object(text: str) -> dict:
    """Parse the first brace-delimited span of a free-text reply.

    Raises ValueError when there is no object to parse.
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise ValueError("No JSON object in LLM response")
    parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("LLM response JSON is not an object")
    return parsed


async def parse_trademark_text(raw_text: str) -> dict:
    """Ask the model to split concatenated result text into fields."""
    reply = await complete_text(build_parse_prompt(raw_text))
    return extract_json_object(reply)
