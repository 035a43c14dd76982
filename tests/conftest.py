import pytest

from winevt.layouts import CMD_WIN_EVENT


CRLF = "\r\n"


def win_event_chunk(record_id, event_id=4624, process_id="668", task="Logon"):
    return CRLF.join([
        "Message              : An account was successfully logged on.",
        "                       ",
        "                       Subject:",
        "                       \tSecurity ID:\t\tS-1-5-18",
        "                       \tLogon ID:\t\t0x3E7",
        f"Id                   : {event_id}",
        "Version              : 2",
        "Qualifiers           : ",
        "Level                : 0",
        "Task                 : 12544",
        "Opcode               : 0",
        "Keywords             : -9214364837600034816",
        f"RecordId             : {record_id}",
        "ProviderName         : Microsoft-Windows-Security-Auditing",
        "ProviderId           : 54849625-5478-4994-a5ba-3e3b0328c30d",
        "LogName              : Security",
        f"ProcessId            : {process_id}",
        "ThreadId             : 7460",
        "MachineName          : DESKTOP-01",
        "UserId               : ",
        "TimeCreated          : 10/19/2026 10:00:01",
        "ActivityId           : 3c1b5a0e-4f2d-0001-6c5b-1b3c2d4f0001",
        "RelatedActivityId    : ",
        "ContainerLog         : Security",
        "MatchedQueryIds      : {}",
        "Bookmark             : System.Diagnostics.Eventing.Reader.EventBookmark",
        "LevelDisplayName     : Information",
        "OpcodeDisplayName    : Info",
        f"TaskDisplayName      : {task}",
        "KeywordsDisplayNames : {Audit Success}",
        "Properties           : {System.Diagnostics.Eventing.Reader.EventProperty...}",
    ]) + CRLF


def win_event_block(*chunks):
    return (
        "PS C:\\Users\\admin> "
        + CMD_WIN_EVENT
        + CRLF * 2
        + CRLF.join(chunks)
        + CRLF * 3
        + "PS C:\\Users\\admin> exit" + CRLF
    )


def event_log_chunk(index, event_id=4624, instance_id="4624", source=True):
    lines = [
        f"EventID            : {event_id}",
        "MachineName        : DESKTOP-01",
        "Data               : {}",
        f"Index              : {index}",
        "Category           : (12544)",
        "CategoryNumber     : 12544",
        "EntryType          : SuccessAudit",
        "Message            : An account was successfully logged on.",
        "                     ",
        "                     Subject:",
        "                     \tSecurity ID:\t\tS-1-5-18",
    ]
    if source:
        lines.append("Source             : Microsoft-Windows-Security-Auditing")
    lines += [
        "ReplacementStrings : {S-1-5-18, DESKTOP-01$, WORKGROUP, 0x3e7...}",
        f"InstanceId         : {instance_id}",
        "TimeGenerated      : 10/19/2026 10:00:01",
        "TimeWritten        : 10/19/2026 10:00:01",
        "UserName           : ",
        "Site               : ",
        "Container          : ",
    ]
    return CRLF.join(lines) + CRLF


def event_log_block(*chunks):
    return CRLF * 2 + CRLF.join(chunks) + CRLF * 3


@pytest.fixture
def make_win_event():
    return win_event_chunk


@pytest.fixture
def make_event_log():
    return event_log_chunk


@pytest.fixture
def win_event_text():
    return win_event_block


@pytest.fixture
def event_log_text():
    return event_log_block
