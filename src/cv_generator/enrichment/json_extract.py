"""Pull a JSON object out of free-form model output."""

import json
import re
from typing import Any

from cv_generator.exceptions import EnhancementError

# ```json ... ``` preferred over a bare ``` ... ``` fence
_JSON_FENCE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_ANY_FENCE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the JSON object a model answered with.

    The first fenced code block wins; otherwise the outermost ``{...}`` span
    of the text is used, which drops chatty preambles and trailers.

    Raises:
        EnhancementError: If no JSON object can be parsed.
    """
    candidate = text.strip()
    match = _JSON_FENCE.search(candidate) or _ANY_FENCE.search(candidate)
    if match:
        candidate = match.group(1).strip()

    start, end = candidate.find("{"), candidate.rfind("}")
    if start == -1 or end < start:
        raise EnhancementError("Model output contains no JSON object", raw=text)
    candidate = candidate[start : end + 1]

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise EnhancementError(f"Model output is not valid JSON: {e.msg}", raw=text) from e

    if not isinstance(parsed, dict):
        raise EnhancementError("Model output is not a JSON object", raw=text)
    return parsed
