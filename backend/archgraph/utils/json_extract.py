import json
import re


def safe_load_json(text: str) -> dict:
    """
    Extract the first JSON object from LLM output.

    Strategy:
    1. Try direct json.loads (fast path)
    2. Fallback to the outermost {...} span
    3. Return {} when nothing parses

    NEVER throws.
    """
    if not text or not isinstance(text, str):
        return {}

    try:
        data = json.loads(text)
        return data if isinstance(data, dict) else {}
    except ValueError:
        pass

    match = re.search(r"\{.*\}", text, re.DOTALL)
    if not match:
        return {}

    try:
        data = json.loads(match.group(0))
        return data if isinstance(data, dict) else {}
    except ValueError:
        return {}
