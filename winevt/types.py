import json
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Tuple, Union


class Variant(Enum):
    """
    Upstream query/record layouts.

    Exactly one is active per host, chosen from the PowerShell version.
    """
    WIN_EVENT = auto()   # Get-WinEvent, PowerShell 5.1+
    EVENT_LOG = auto()   # Get-EventLog, older hosts


class FieldKind(Enum):
    STRING = auto()
    INT = auto()
    STRUCT = auto()


@dataclass(frozen=True)
class FieldSpec:
    """
    One entry of a record schema.

    label: key text as printed by PowerShell (also the JSON key)
    attr:  attribute name on the record dataclass
    """
    label: str
    attr: str
    kind: FieldKind


@dataclass(frozen=True)
class EventMessage:
    """
    Free-text message of one record.

    description: first line, label stripped
    details:     remaining lines, verbatim
    """
    description: str = ""
    details: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"Description": self.description, "Details": self.details}


def _record_dict(record, schema: Tuple[FieldSpec, ...]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for spec in schema:
        value = getattr(record, spec.attr)
        if spec.kind == FieldKind.STRUCT:
            value = value.to_dict()
        out[spec.label] = value
    return out


@dataclass(frozen=True)
class WinEvent:
    """
    Record produced by Get-WinEvent (modern layout).

    record_id is the identity key.
    """
    id: int = 0
    version: int = 0
    qualifiers: str = ""
    level: int = 0
    task: int = 0
    opcode: int = 0
    keywords: int = 0
    record_id: int = 0
    provider_name: str = ""
    provider_id: str = ""
    log_name: str = ""
    process_id: int = 0
    thread_id: int = 0
    machine_name: str = ""
    user_id: str = ""
    time_created: str = ""
    activity_id: str = ""
    related_activity_id: str = ""
    container_log: str = ""
    matched_query_ids: str = ""
    bookmark: str = ""
    level_display_name: str = ""
    opcode_display_name: str = ""
    task_display_name: str = ""
    keywords_display_names: str = ""
    properties: str = ""
    message: EventMessage = field(default_factory=EventMessage)

    @property
    def identity(self) -> int:
        return self.record_id

    @property
    def type_id(self) -> int:
        return self.id

    def to_dict(self) -> Dict[str, Any]:
        return _record_dict(self, WIN_EVENT_SCHEMA)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def __str__(self) -> str:
        return (
            f"{self.id}\t{self.time_created}\t{self.record_id}\t"
            f"{self.task_display_name}\t\t{self.message.description}"
        )


@dataclass(frozen=True)
class EventLog:
    """
    Record produced by Get-EventLog (legacy layout).

    index is the identity key.
    """
    event_id: int = 0
    machine_name: str = ""
    data: str = ""
    index: int = 0
    category: str = ""
    category_number: int = 0
    entry_type: str = ""
    source: str = ""
    replacement_strings: str = ""
    instance_id: int = 0
    time_generated: str = ""
    time_written: str = ""
    user_name: str = ""
    site: str = ""
    container: str = ""
    message: EventMessage = field(default_factory=EventMessage)

    @property
    def identity(self) -> int:
        return self.index

    @property
    def type_id(self) -> int:
        return self.event_id

    def to_dict(self) -> Dict[str, Any]:
        return _record_dict(self, EVENT_LOG_SCHEMA)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def __str__(self) -> str:
        return (
            f"{self.event_id}\t{self.time_generated}\t{self.index}\t"
            f"{self.source}\t\t{self.message.description}"
        )


EventRecord = Union[WinEvent, EventLog]


_S, _I, _N = FieldKind.STRING, FieldKind.INT, FieldKind.STRUCT

# Ordered as PowerShell prints them.
WIN_EVENT_SCHEMA: Tuple[FieldSpec, ...] = (
    FieldSpec("Id", "id", _I),
    FieldSpec("Version", "version", _I),
    FieldSpec("Qualifiers", "qualifiers", _S),
    FieldSpec("Level", "level", _I),
    FieldSpec("Task", "task", _I),
    FieldSpec("Opcode", "opcode", _I),
    FieldSpec("Keywords", "keywords", _I),
    FieldSpec("RecordId", "record_id", _I),
    FieldSpec("ProviderName", "provider_name", _S),
    FieldSpec("ProviderId", "provider_id", _S),
    FieldSpec("LogName", "log_name", _S),
    FieldSpec("ProcessId", "process_id", _I),
    FieldSpec("ThreadId", "thread_id", _I),
    FieldSpec("MachineName", "machine_name", _S),
    FieldSpec("UserId", "user_id", _S),
    FieldSpec("TimeCreated", "time_created", _S),
    FieldSpec("ActivityId", "activity_id", _S),
    FieldSpec("RelatedActivityId", "related_activity_id", _S),
    FieldSpec("ContainerLog", "container_log", _S),
    FieldSpec("MatchedQueryIds", "matched_query_ids", _S),
    FieldSpec("Bookmark", "bookmark", _S),
    FieldSpec("LevelDisplayName", "level_display_name", _S),
    FieldSpec("OpcodeDisplayName", "opcode_display_name", _S),
    FieldSpec("TaskDisplayName", "task_display_name", _S),
    FieldSpec("KeywordsDisplayNames", "keywords_display_names", _S),
    FieldSpec("Properties", "properties", _S),
    FieldSpec("Message", "message", _N),
)

EVENT_LOG_SCHEMA: Tuple[FieldSpec, ...] = (
    FieldSpec("EventID", "event_id", _I),
    FieldSpec("MachineName", "machine_name", _S),
    FieldSpec("Data", "data", _S),
    FieldSpec("Index", "index", _I),
    FieldSpec("Category", "category", _S),
    FieldSpec("CategoryNumber", "category_number", _I),
    FieldSpec("EntryType", "entry_type", _S),
    FieldSpec("Source", "source", _S),
    FieldSpec("ReplacementStrings", "replacement_strings", _S),
    FieldSpec("InstanceId", "instance_id", _I),
    FieldSpec("TimeGenerated", "time_generated", _S),
    FieldSpec("TimeWritten", "time_written", _S),
    FieldSpec("UserName", "user_name", _S),
    FieldSpec("Site", "site", _S),
    FieldSpec("Container", "container", _S),
    FieldSpec("Message", "message", _N),
)

# Label of the identity key per record class.
IDENTITY_LABELS: Dict[type, str] = {
    WinEvent: "RecordId",
    EventLog: "Index",
}

SCHEMAS: Dict[type, Tuple[FieldSpec, ...]] = {
    WinEvent: WIN_EVENT_SCHEMA,
    EventLog: EVENT_LOG_SCHEMA,
}

RECORD_TYPES: Dict[Variant, type] = {
    Variant.WIN_EVENT: WinEvent,
    Variant.EVENT_LOG: EventLog,
}
