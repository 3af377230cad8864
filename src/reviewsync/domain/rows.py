"""Encoding of canonical reviews as raw table rows.

The reviews table has no native null: absent values are written as ``NULL_MARKER`` and
translated back to ``None`` when rows are read. Column order is owned by the table, so
rows are always projected onto the headers the table currently has.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from .review import CanonicalReview, ReviewField

if TYPE_CHECKING:
    from collections.abc import Sequence

NULL_MARKER: Final[str] = "<null>"

_FIELDS_BY_HEADER: Final[dict[str, ReviewField]] = {field.value: field for field in ReviewField}


def to_row(review: CanonicalReview, headers: Sequence[str]) -> list[str]:
    """Project ``review`` onto ``headers``.

    Headers that are not review fields get an empty cell so that column alignment is kept.
    Review fields without a header are dropped; see ``missing_headers``.
    """

    row: list[str] = []
    for header in headers:
        field = _FIELDS_BY_HEADER.get(header)
        if field is None:
            row.append("")
            continue
        value = review[field]
        row.append(NULL_MARKER if value is None else value)
    return row


def from_row(headers: Sequence[str], values: Sequence[str]) -> CanonicalReview:
    """Rebuild a review from a raw row.

    ``values`` may be shorter than ``headers`` (trailing empty cells are often trimmed by
    the table); missing cells and null markers both decode to ``None``.
    """

    cells = dict(zip(headers, values, strict=False))
    decoded: dict[ReviewField, str | None] = {}
    for field in ReviewField:
        value = cells.get(field.value)
        decoded[field] = None if value == NULL_MARKER else value
    return CanonicalReview.from_mapping(decoded)


def missing_headers(headers: Sequence[str]) -> list[ReviewField]:
    """Review fields that cannot be stored under ``headers``."""

    present = set(headers)
    return [field for field in ReviewField if field.value not in present]
