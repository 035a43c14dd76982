from dataclasses import dataclass
from typing import Dict

from .types import Variant


NEWLINE = "\r\n"

# Window bounds use the host's default DateTime parsing format.
TIME_LAYOUT = "%m/%d/%Y %H:%M:%S"

CMD_VERSION = "$PSVersionTable.PSVersion"

# Fed through stdin: variables, query, exit.
CMD_VARS = "$Begin = Get-Date -Date '{begin}'\n$End = Get-Date -Date '{end}'\n"
CMD_WIN_EVENT = (
    "Get-WinEvent -FilterHashtable "
    "@{LogName='Security';StartTime=$Begin;EndTime=$End} "
    "| Select-Object -Property *\n"
)
CMD_EXIT = "exit\n"

# Passed as a single argument.
CMD_EVENT_LOG = (
    "Get-EventLog -LogName Security "
    "| Where-Object {{$_.TimeGenerated -ge '{begin}' -and $_.TimeGenerated -lt '{end}'}} "
    "| Select-Object -Property *\n"
)


@dataclass(frozen=True)
class Layout:
    """
    Text boundaries of one query's output.

    anchor: label that opens every record
    banner: text right before the first record
    tail:   text right after the last record
    """
    anchor: str
    banner: str
    tail: str


LAYOUTS: Dict[Variant, Layout] = {
    Variant.WIN_EVENT: Layout(
        anchor="Message",
        banner=CMD_WIN_EVENT + NEWLINE * 2,
        tail=NEWLINE * 3,
    ),
    Variant.EVENT_LOG: Layout(
        anchor="EventID",
        banner=NEWLINE * 2,
        tail=NEWLINE * 3,
    ),
}
