from __future__ import annotations

from typing import List, Sequence

from models import IndexEntry, PublishedRecord


def reconcile(prior: Sequence[PublishedRecord], candidates: Sequence[IndexEntry]) -> List[IndexEntry]:
    """Index entries that still need posting, in index order.

    Entries without an id are skipped for good; they can never be recorded.
    """
    published_ids = {r.id for r in prior}
    return [c for c in candidates if c.id and c.id not in published_ids]
