"""Draining of token-paginated sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Page[T]:
    """Records of one page and the token of the next page, if any."""

    records: list[T] = field(default_factory=list)
    next_token: str | None = None


type PageFetcher[T] = Callable[[str | None], Awaitable[Page[T]]]
type ContinuePredicate[T] = Callable[[Page[T]], bool]


async def drain_pages[T](
    fetch_page: PageFetcher[T],
    *,
    should_continue: ContinuePredicate[T] | None = None,
) -> list[T]:
    """Fetch pages until the source is exhausted or ``should_continue`` declines.

    The records of the page that stopped the loop are included. Without a predicate every
    page is fetched. ``should_continue`` only bounds the number of calls: pages at the
    boundary may still hold records that are already known, so callers must deduplicate.
    """

    records: list[T] = []
    token: str | None = None
    fetched = 0
    while True:
        page = await fetch_page(token)
        fetched += 1
        records.extend(page.records)

        if page.next_token is None:
            break
        if should_continue is not None and not should_continue(page):
            log.debug("Stopping pagination after %s pages: predicate declined", fetched)
            break
        if page.next_token == token:
            raise RuntimeError(f"Paginated source returned the same page token twice: {token}")
        token = page.next_token

    return records
