"""
Strict decoding of a model answer into MarketDetails.

The model is asked to answer with a JSON object, but it often wraps it in a
markdown code fence and adds some prose around it. The first fenced block is
decoded when there is one, otherwise the whole text is decoded. Anything short
of an object carrying the three expected keys is rejected as a whole.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, List, Optional

from market_factory.parsing.schemas import MarketDetails

LOGGER = logging.getLogger(__name__)

FENCE = "```"
FENCE_OPENING_PATTERN = re.compile(r"```(?:json)?\s*\{", re.IGNORECASE)

# (field name, JSON key the model is asked to produce)
REQUIRED_KEYS = (
    ("resolution_criteria", "resolutionCriteria"),
    ("description", "description"),
    ("edge_cases", "edgeCases"),
)


class FailureReason(str, Enum):
    MALFORMED = "Malformed"
    NOT_AN_OBJECT = "NotAnObject"
    MISSING_FIELD = "MissingField"


class ParseFailure(ValueError):
    """Raised when a model answer does not hold a complete structured record."""

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        missing: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.missing = missing or []


def find_fenced_json(raw: str) -> Optional[str]:
    """
    Return the content of the first ```json fenced block, braces included.

    Args:
        raw: Model answer

    Returns:
        The captured object text, or None when there is no fenced object
    """
    opening = FENCE_OPENING_PATTERN.search(raw)
    if opening is None:
        return None

    start = opening.end() - 1
    # closing fence: the first ``` whose preceding non-blank character is a `}`
    fence = raw.find(FENCE, start + 1)
    while fence != -1:
        end = fence
        while end > start + 1 and raw[end - 1].isspace():
            end -= 1
        if end > start + 1 and raw[end - 1] == "}":
            return raw[start:end]
        fence = raw.find(FENCE, fence + 1)
    return None


def _decode(payload: str) -> Any:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseFailure(
            FailureReason.MALFORMED,
            f"Response is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
        ) from e
    except (ValueError, RecursionError) as e:
        # oversized integer literals, nesting deeper than the interpreter stack
        raise ParseFailure(
            FailureReason.MALFORMED, f"Response is not valid JSON: {e}"
        ) from e


def _missing_keys(data: dict) -> List[str]:
    missing = []
    for field_name, alias in REQUIRED_KEYS:
        value = data.get(alias, data.get(field_name))
        if value is None:
            missing.append(alias)
    return missing


def try_parse(raw: str) -> MarketDetails:
    """
    Decode a complete MarketDetails record from a model answer.

    Args:
        raw: Model answer, optionally wrapping the JSON object in a code fence

    Returns:
        The decoded record; extra keys in the object are ignored

    Raises:
        ParseFailure: with reason MALFORMED, NOT_AN_OBJECT or MISSING_FIELD
    """
    raw = raw or ""
    fenced = find_fenced_json(raw)
    if fenced is not None:
        LOGGER.debug("Found fenced JSON block (%d chars)", len(fenced))
        data = _decode(fenced)
    else:
        data = _decode(raw.strip())

    if not isinstance(data, dict):
        raise ParseFailure(
            FailureReason.NOT_AN_OBJECT,
            f"Expected a JSON object, got {type(data).__name__}",
        )

    missing = _missing_keys(data)
    if missing:
        raise ParseFailure(
            FailureReason.MISSING_FIELD,
            f"JSON object is missing required keys: {', '.join(missing)}",
            missing=missing,
        )

    return MarketDetails.model_validate(
        {alias: data.get(alias, data.get(field_name)) for field_name, alias in REQUIRED_KEYS}
    )
