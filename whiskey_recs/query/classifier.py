from __future__ import annotations

import json
import logging

from groq import Groq

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .interpreter import interpret
from .models import StructuredHints

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# LLM Prompt
# ---------------------------------------------------------------------------

HINT_EXTRACTION_PROMPT = """\
You are a whiskey request parser. Given a customer's message, extract the \
shopping constraints it states as JSON.

Return ONLY valid JSON with these fields (omit fields the message does not state):
{
  "min_price": 50000,
  "max_price": 150000,
  "flavor_keywords": ["peat", "smoky", "sweet", "vanilla", "honey", "fruit", "sherry", "spice", "oak", "creamy"],
  "category": "single_malt | blended | bourbon | rye | other",
  "high_end": false,
  "beginner": false
}

Prices are in Korean won: "10만원" is 100000 and "100k" is 100000.
Only use flavor keywords from the list above, in lowercase.
Set "high_end" for requests for expensive or premium bottles and "beginner" \
for requests aimed at newcomers."""


def classify(text: str, config: LLMConfig = DEFAULT_LLM_CONFIG) -> StructuredHints:
    """Read structured hints from *text*, preferring the LLM when configured.

    Falls back to the regex interpreter when the LLM is disabled, has no API
    key, or returns anything unusable.
    """
    if not config.enabled or not config.api_key:
        return interpret(text)

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": HINT_EXTRACTION_PROMPT},
                {"role": "user", "content": text},
            ],
            max_tokens=config.max_tokens,
            temperature=0.1,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or "{}"
        parsed = json.loads(content)
        if isinstance(parsed.get("flavor_keywords"), list):
            parsed["flavor_keywords"] = [str(k).strip().lower() for k in parsed["flavor_keywords"]]
        return StructuredHints(**parsed)

    except Exception:
        logger.warning("Hint extraction via LLM failed, using regex interpreter", exc_info=True)
        return interpret(text)
