import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .errors import EventParseError, MalformedChunkError
from .layouts import LAYOUTS
from .normalize import map_fields
from .parsers import (
    decompose_event_log,
    decompose_win_event,
    parse_key_values,
    parse_message,
    split_records,
)
from .types import EventRecord, RECORD_TYPES, Variant


logger = logging.getLogger("winevt.ingest")


DECOMPOSERS: Dict[Variant, Callable[[str], Tuple[str, str]]] = {
    Variant.WIN_EVENT: decompose_win_event,
    Variant.EVENT_LOG: decompose_event_log,
}


@dataclass
class ParseFailure:
    raw: str
    reason: str


@dataclass
class IngestResult:
    records: List[EventRecord] = field(default_factory=list)
    failures: List[ParseFailure] = field(default_factory=list)
    malformed: int = 0


def ingest_chunk(chunk: str, variant: Variant) -> Optional[EventRecord]:
    """
    Turn one raw record chunk into a typed record.

    Pipeline:
      chunk
        → variant decomposition (message / key-value sections)
          → message parser + key/value parser
            → field mapping
              → EventRecord

    Returns None for a malformed chunk (not a record).
    Raises RecordLayoutError / FieldCoercionError with the chunk attached.
    """
    try:
        message_section, kv_section = DECOMPOSERS[variant](chunk)
    except MalformedChunkError:
        return None

    message = parse_message(message_section)
    fields = parse_key_values(kv_section)

    try:
        return map_fields(fields, RECORD_TYPES[variant], message)
    except EventParseError as err:
        err.chunk = err.chunk or chunk
        raise


def ingest_block(
    text: str,
    variant: Variant,
    strict: bool = False,
) -> IngestResult:
    """
    Parse every record of one query dump.

    strict=False: a record that fails field mapping is logged,
    recorded as a ParseFailure and skipped.
    strict=True: the first such failure propagates.
    """
    layout = LAYOUTS[variant]
    result = IngestResult()

    for chunk in split_records(text, layout.anchor, layout.banner, layout.tail):
        try:
            record = ingest_chunk(chunk, variant)
        except EventParseError as err:
            if strict:
                raise
            logger.warning("dropping record: %s", err)
            logger.debug("failed chunk: %r", err.chunk)
            result.failures.append(ParseFailure(raw=err.chunk, reason=str(err)))
            continue

        if record is None:
            logger.debug("skipping malformed chunk: %r", chunk[:80])
            result.malformed += 1
            continue

        result.records.append(record)

    return result
