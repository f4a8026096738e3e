"""
In-memory range store with code and date indices.

The store exclusively owns the range records. Lookups by code are O(1)
through an insertion-ordered dict; lookups by date go through a secondary
index that every mutation invalidates and the next read (or refresh)
rebuilds in full.
"""

from typing import Any, Iterable, Iterator, Optional

import structlog

from ..data.models import DateRange, Mark
from ..data.normalizer import RangeNormalizer
from ..errors import DuplicateCodeError, NotFoundError
from ..utils.dates import DateLike, format_date

logger = structlog.get_logger(__name__)


class RangeStore:
    """Holds the current collection of ranges keyed by unique code."""

    def __init__(self, normalizer: Optional[RangeNormalizer] = None):
        self.logger = logger
        self.normalizer = normalizer or RangeNormalizer()
        self._ranges: dict[str, DateRange] = {}
        self._date_index: dict[str, list[DateRange]] = {}
        self._mark_index: dict[str, str] = {}
        self._dirty = False
        self.revision = 0

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[DateRange]:
        return iter(list(self._ranges.values()))

    def __contains__(self, code: object) -> bool:
        return code in self._ranges

    @property
    def ranges(self) -> list[DateRange]:
        """Ranges in insertion order."""
        return list(self._ranges.values())

    def add(self, raw: Any) -> DateRange:
        """
        Validate and append a range.

        Raises:
            ValidationError: If the payload is invalid
            DuplicateCodeError: If the code is already stored
        """
        record = self.normalizer.normalize(raw, index=len(self._ranges))
        if record.code in self._ranges:
            raise DuplicateCodeError(
                f"Range with code '{record.code}' already exists",
                code=record.code,
            )

        self._ranges[record.code] = record
        self._invalidate()

        self.logger.info("Added range", **record.describe())
        return record

    def remove(self, code: str) -> bool:
        """Remove a range; a missing code is a soft failure returning False."""
        if self._ranges.pop(code, None) is None:
            self.logger.warning("Range not found for removal", code=code)
            return False

        self._invalidate()
        self.logger.info("Removed range", code=code)
        return True

    def update(self, code: str, patch: Any) -> DateRange:
        """
        Merge a patch into the stored range, keeping its code and position.

        Raises:
            NotFoundError: If no range has this code
            ValidationError: If the patched range is invalid
        """
        existing = self._ranges.get(code)
        if existing is None:
            raise NotFoundError(f"Range with code '{code}' not found", code=code)

        updated = self.normalizer.apply_patch(existing, patch)
        self._ranges[code] = updated
        self._invalidate()

        self.logger.info("Updated range", **updated.describe())
        return updated

    def clear(self) -> int:
        """Drop every range and index; returns how many ranges were dropped."""
        count = len(self._ranges)
        self._ranges.clear()
        self._mark_index.clear()
        self._invalidate()

        self.logger.info("Cleared ranges", count=count)
        return count

    def load(self, raws: Iterable[Any]) -> int:
        """
        Replace the whole collection with a validated batch.

        Every entry is validated before anything is committed, so a failing
        batch leaves the store untouched.

        Raises:
            ValidationError: If any entry is invalid
            DuplicateCodeError: If two entries share a code
        """
        records = self.normalizer.normalize_batch(list(raws))

        staged: dict[str, DateRange] = {}
        for record in records:
            if record.code in staged:
                raise DuplicateCodeError(
                    f"Range with code '{record.code}' appears more than once in batch",
                    code=record.code,
                )
            staged[record.code] = record

        self._ranges = staged
        self._mark_index.clear()
        self._invalidate()

        self.logger.info("Loaded ranges", count=len(staged))
        return len(staged)

    def get_by_code(self, code: str) -> Optional[DateRange]:
        return self._ranges.get(code)

    def get_by_date(self, value: DateLike) -> list[DateRange]:
        """Ranges covering the date, in insertion order."""
        if self._dirty:
            self.rebuild_indices()
        return list(self._date_index.get(format_date(value), ()))

    @property
    def date_count(self) -> int:
        """Number of distinct dates covered by at least one range."""
        if self._dirty:
            self.rebuild_indices()
        return len(self._date_index)

    def rebuild_indices(self) -> None:
        """Recompute the date index from the current ranges."""
        index: dict[str, list[DateRange]] = {}
        for record in self._ranges.values():
            for day in record.days:
                index.setdefault(day, []).append(record)
        self._date_index = index
        self._dirty = False

    def index_marks(self, marks: Iterable[Mark]) -> None:
        """Replace the mark key index with the keys of a fresh compile."""
        self._mark_index = {mark.key: mark.range_code for mark in marks}

    def resolve_mark(self, key: str) -> Optional[DateRange]:
        """Range owning an installed mark, or None if the mark is stale."""
        code = self._mark_index.get(key)
        if code is None:
            return None
        return self._ranges.get(code)

    @property
    def mark_count(self) -> int:
        return len(self._mark_index)

    def release(self) -> None:
        """Drop every record and index; used on plugin destruction."""
        self._ranges.clear()
        self._date_index.clear()
        self._mark_index.clear()
        self._dirty = False

    def _invalidate(self) -> None:
        self._dirty = True
        self.revision += 1
