"""
Tolerant JSON extraction for model responses.

Models are told to answer with a bare JSON object but regularly wrap it in
prose or markdown fences. Parsing is done in two stages:

1. strict ``json.loads`` of the whole text
2. the span from the first ``{`` to the last ``}``, parsed on its own

Text that parses strictly to anything but an object (an array, a number)
fails at once without the second stage. Failures raise
InvalidResponseFormatError carrying the model's text.
"""

import json
import logging
from typing import Any, Dict

from utils.exceptions import InvalidResponseFormatError

logger = logging.getLogger(__name__)


def _brace_span(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return ""
    return text[start:end + 1]


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse a JSON object out of model output, raising InvalidResponseFormatError."""
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass
    else:
        if isinstance(parsed, dict):
            return parsed
        logger.warning(f"Model returned JSON {type(parsed).__name__}, expected an object")
        raise InvalidResponseFormatError(raw_text=text)

    candidate = _brace_span(text or "")
    if candidate:
        try:
            parsed = json.loads(candidate)
            if isinstance(parsed, dict):
                logger.debug("Extracted JSON object via brace match")
                return parsed
        except json.JSONDecodeError as e:
            logger.warning(f"Brace-matched JSON failed to parse: {e}")

    raise InvalidResponseFormatError(raw_text=text)
