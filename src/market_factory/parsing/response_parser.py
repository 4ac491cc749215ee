import logging

from market_factory.parsing.schemas import MarketDetails
from market_factory.parsing.section_splitter import split_sections
from market_factory.parsing.structured_extractor import ParseFailure, try_parse

LOGGER = logging.getLogger(__name__)


def parse_model_response(raw: str) -> MarketDetails:
    """
    Turn a model answer into MarketDetails.

    Strict JSON decoding is tried first. When it fails for any reason, the
    answer is split heuristically instead, so this never raises and every
    field is either extracted text or the not-found sentinel.

    Args:
        raw: Text of the model answer

    Returns:
        A fully populated MarketDetails record
    """
    raw = raw or ""
    try:
        return try_parse(raw)
    except ParseFailure as e:
        LOGGER.info("Structured decode failed (%s): %s", e.reason.value, e)
    return split_sections(raw)
