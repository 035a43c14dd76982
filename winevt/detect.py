import re
from typing import Optional, Tuple

from .types import Variant


# Get-WinEvent is only usable from PowerShell 5.1 on.
BEST_VERSION: Tuple[int, int] = (5, 1)

# "5      1      19041  1682" row of $PSVersionTable.PSVersion
VERSION_ROW = re.compile(r"^\s*(\d+)\s+(\d+)(?:\s+-?\d+)*\s*$")

# First label of the first record, as printed by Format-List.
LEADING_LABEL = re.compile(r"^\s*(\w+)\s*:", re.MULTILINE)


def parse_ps_version(text: str) -> Optional[Tuple[int, int]]:
    """
    Parse the table printed by `$PSVersionTable.PSVersion`:

        Major  Minor  Build  Revision
        -----  -----  -----  --------
        5      1      19041  1682

    Returns (major, minor), or None when no numeric row is present.
    """
    if not text:
        return None

    for line in text.splitlines():
        m = VERSION_ROW.match(line)
        if m:
            return int(m.group(1)), int(m.group(2))

    return None


def select_variant(version: Optional[Tuple[int, int]]) -> Variant:
    if version is not None and version >= BEST_VERSION:
        return Variant.WIN_EVENT
    return Variant.EVENT_LOG


def detect_layout(text: str) -> Optional[Variant]:
    """
    Guess the layout of a captured query dump from its first label.

    Used for offline parsing when the variant is not given.
    Conservative: None when neither layout is recognised.
    """
    if not text:
        return None

    m = LEADING_LABEL.search(text)
    if not m:
        return None

    label = m.group(1)
    if label == "Message":
        return Variant.WIN_EVENT
    if label == "EventID":
        return Variant.EVENT_LOG

    return None
