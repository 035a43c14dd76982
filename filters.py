from typing import Iterable, List, Optional

from winevt.types import EventRecord


def parse_allow_list(text: Optional[str]) -> str:
    """
    Normalise the configured allow-list, e.g. "4624, 4625" -> "4624,4625".

    Empty / None means no filtering.
    """
    if not text:
        return ""
    return ",".join(p.strip() for p in text.split(",") if p.strip())


def is_allowed(record: EventRecord, allow_list: str) -> bool:
    if not allow_list:
        return True
    # Substring match against the raw list text, not set membership.
    return str(record.type_id) in allow_list


def allow_list_filter(
    records: Iterable[EventRecord],
    allow_list: Optional[str],
) -> List[EventRecord]:
    allow = parse_allow_list(allow_list)
    return [r for r in records if is_allowed(r, allow)]
