import logging
from dataclasses import dataclass, field
from typing import List, Optional

from filters import allow_list_filter
from store import SeenSet, deduplicate, order_batch
from winevt.ingest import ParseFailure, ingest_block
from winevt.types import EventRecord, Variant


logger = logging.getLogger("winevt.cycle")


@dataclass(frozen=True)
class CycleResult:
    records: List[EventRecord]
    seen: SeenSet
    parsed: int = 0
    duplicates: int = 0
    filtered: int = 0
    malformed: int = 0
    failures: List[ParseFailure] = field(default_factory=list)


def run_cycle(
    text: str,
    variant: Variant,
    seen: Optional[SeenSet] = None,
    allow_list: Optional[str] = None,
    strict: bool = False,
) -> CycleResult:
    """
    One poll cycle over an already decoded query dump.

    Pipeline:
      raw text
        → ingest (split, parse, map)
          → dedup against last cycle
            → order by identity
              → allow-list filter

    A result is only returned for a completed pass. If anything raises,
    the caller still holds the previous `seen` set and should keep it.
    """
    ingested = ingest_block(text, variant, strict=strict)

    dedup = deduplicate(ingested.records, seen)
    ordered = order_batch(dedup.records)
    allowed = allow_list_filter(ordered, allow_list)

    parsed = len(ingested.records)
    duplicates = parsed - len(dedup.records)
    filtered = len(ordered) - len(allowed)

    logger.debug(
        "cycle: parsed=%d duplicates=%d filtered=%d malformed=%d failed=%d",
        parsed,
        duplicates,
        filtered,
        ingested.malformed,
        len(ingested.failures),
    )

    return CycleResult(
        records=allowed,
        seen=dedup.seen,
        parsed=parsed,
        duplicates=duplicates,
        filtered=filtered,
        malformed=ingested.malformed,
        failures=ingested.failures,
    )
