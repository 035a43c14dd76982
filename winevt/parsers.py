import re
from typing import Dict, Iterator, Tuple

from .errors import MalformedChunkError
from .types import EventMessage


LINE_BREAK = re.compile(r"\r?\n")

_label_patterns: Dict[str, re.Pattern] = {}


def _label_re(label: str) -> re.Pattern:
    # A Format-List label: start of a line, padding, then a colon.
    pattern = _label_patterns.get(label)
    if pattern is None:
        pattern = re.compile(
            rf"^{re.escape(label)}(?=[ \t]*:)",
            re.MULTILINE,
        )
        _label_patterns[label] = pattern
    return pattern


def find_label(text: str, label: str) -> int:
    """Index of `label` opening a line of `text`, or -1."""
    m = _label_re(label).search(text)
    return m.start() if m else -1


# -----------------------------
# RECORD SPLITTING
# -----------------------------

def strip_boundaries(text: str, banner: str, tail: str) -> str:
    """
    Cut the payload out from between the banner and the tail marker.

    The text is left as-is unless both are found, the tail after the banner.
    """
    if not text:
        return ""

    start = text.find(banner) if banner else -1
    if start < 0:
        return text

    start += len(banner)
    end = text.find(tail, start) if tail else -1
    if end < 0:
        return text

    return text[start:end]


def split_records(
    text: str,
    anchor: str,
    banner: str = "",
    tail: str = "",
) -> Iterator[str]:
    """
    Recover per-record chunks from one query dump.

    Format-List output has no record separator. The only reliable
    boundary is a line opening with the anchor label, so the payload is
    split right before every such line. Anything ahead of the first
    anchor is noise and is dropped.
    """
    payload = strip_boundaries(text, banner, tail)
    if not payload.strip():
        return

    boundary = re.compile(rf"\r?\n(?={re.escape(anchor)}[ \t]*:)")
    pieces = boundary.split("\n" + payload)

    # pieces[0] is whatever preceded the first anchor
    for piece in pieces[1:]:
        if piece.strip():
            yield piece


# -----------------------------
# CHUNK DECOMPOSITION
# -----------------------------

def decompose_win_event(chunk: str) -> Tuple[str, str]:
    """
    Get-WinEvent record: Message first, then Id and the other keys.

    Returns (message_section, key_value_section).
    """
    idi = find_label(chunk, "Id")
    if idi < 0:
        raise MalformedChunkError("no 'Id' label in record", chunk)

    return chunk[:idi], chunk[idi:]


def decompose_event_log(chunk: str) -> Tuple[str, str]:
    """
    Get-EventLog record: keys, then Message, then Source and more keys.

    The two key ranges are joined into one key/value section.
    """
    msgi = find_label(chunk, "Message")
    srci = find_label(chunk, "Source")

    if msgi < 0 or srci < 0 or srci < msgi:
        raise MalformedChunkError(
            "'Message' and 'Source' labels missing or out of order", chunk
        )

    return chunk[msgi:srci], chunk[:msgi] + chunk[srci:]


# -----------------------------
# SECTION PARSERS
# -----------------------------

def parse_message(section: str) -> EventMessage:
    """
    Parse a message section like:
      Message : An account was successfully logged on.
                Subject: ...

    First line after its first colon -> description.
    Everything after the first line break -> details, verbatim.
    """
    if not section:
        return EventMessage()

    parts = LINE_BREAK.split(section, maxsplit=1)
    first = parts[0]
    details = parts[1] if len(parts) > 1 else ""

    _, colon, description = first.partition(":")
    if not colon:
        description = ""

    return EventMessage(description=description, details=details)


def parse_key_values(section: str) -> Dict[str, str]:
    """
    Parse `Key : value` lines. Lines without a colon are skipped,
    later keys overwrite earlier ones.
    """
    fields: Dict[str, str] = {}

    for line in LINE_BREAK.split(section):
        if not line or ":" not in line:
            continue
        key, _, value = line.partition(":")
        fields[key.strip()] = value.strip()

    return fields
