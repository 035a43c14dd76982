from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from winevt.types import EventRecord


SeenSet = FrozenSet[int]  # identity keys seen in one cycle


@dataclass(frozen=True)
class DedupResult:
    records: List[EventRecord]
    seen: SeenSet


# ---------- Dedup ----------

def deduplicate(
    batch: Iterable[EventRecord],
    seen: Optional[SeenSet] = None,
) -> DedupResult:
    """
    Drop records already reported last cycle.

    The returned set holds the identity of every record in `batch`,
    kept or dropped. It replaces `seen`; it is not merged with it.
    Query windows overlap, so records at the edge show up again and
    must still be recognised next cycle.
    """
    previous = seen or frozenset()

    kept: List[EventRecord] = []
    current = set()

    for record in batch:
        key = record.identity
        current.add(key)
        if key not in previous:
            kept.append(record)

    return DedupResult(records=kept, seen=frozenset(current))


# ---------- Ordering ----------

def order_batch(records: Iterable[EventRecord]) -> List[EventRecord]:
    # sorted() is stable: equal keys keep discovery order
    return sorted(records, key=lambda r: r.identity)
