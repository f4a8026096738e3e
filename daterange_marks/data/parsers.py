"""
Range batch parsing.

Accepts the shapes callers hand to ``load``: a single range mapping, a
sequence of mappings or ``DateRange`` records, or a JSON document holding
either, decoded with orjson.
"""

from typing import Any, Mapping, Union

import orjson

from ..errors import ValidationError
from .models import DateRange

RangeBatch = Union[str, bytes, Mapping[str, Any], DateRange, list, tuple]


def parse_json_payload(raw_data: Union[str, bytes]) -> Any:
    """
    Parse a JSON document of range payloads.

    Raises:
        ValidationError: If the document is not valid JSON
    """
    try:
        return orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON range payload: {e}", field="ranges") from e


def coerce_range_batch(ranges: RangeBatch) -> list[Any]:
    """
    Flatten any supported batch shape into a list of range payloads.

    Raises:
        ValidationError: If the batch has an unsupported shape
    """
    if isinstance(ranges, (str, bytes)):
        ranges = parse_json_payload(ranges)

    if isinstance(ranges, (Mapping, DateRange)):
        return [ranges]

    if isinstance(ranges, (list, tuple)):
        return list(ranges)

    raise ValidationError(
        f"Ranges must be a mapping, a sequence or a JSON document, got {type(ranges).__name__}",
        field="ranges",
        value=ranges,
    )
