import pytest

from winevt.errors import MalformedChunkError
from winevt.parsers import (
    decompose_event_log,
    decompose_win_event,
    find_label,
    parse_key_values,
    parse_message,
    split_records,
    strip_boundaries,
)
from winevt.types import EventMessage


# ---------- Message ----------

def test_parse_message_splits_description_and_details():
    msg = parse_message(
        "Message: something happened\r\ndetail line one\r\ndetail line two"
    )
    assert msg.description == " something happened"
    assert msg.details == "detail line one\r\ndetail line two"


def test_parse_message_empty_input():
    assert parse_message("") == EventMessage()


def test_parse_message_single_line_is_all_description():
    msg = parse_message("Message : only one line")
    assert msg.description == " only one line"
    assert msg.details == ""


def test_parse_message_first_line_without_colon():
    msg = parse_message("no label here\r\nrest")
    assert msg.description == ""
    assert msg.details == "rest"


# ---------- Key / value ----------

def test_parse_key_values_trims_and_splits_on_first_colon():
    fields = parse_key_values(
        "Id          : 4624\r\n"
        "TimeCreated : 10/19/2026 10:00:01\r\n"
        "no colon on this line\r\n"
        "\r\n"
        "Empty       : \r\n"
    )
    assert fields == {
        "Id": "4624",
        "TimeCreated": "10/19/2026 10:00:01",
        "Empty": "",
    }


def test_parse_key_values_last_duplicate_wins():
    fields = parse_key_values("Level : 0\r\nLevel : 4\r\n")
    assert fields["Level"] == "4"


# ---------- Boundaries / splitting ----------

def test_strip_boundaries_needs_both_markers():
    assert strip_boundaries("BANNERpayloadTAIL", "BANNER", "TAIL") == "payload"
    assert strip_boundaries("BANNERpayload", "BANNER", "TAIL") == "BANNERpayload"
    assert strip_boundaries("payloadTAIL", "BANNER", "TAIL") == "payloadTAIL"


def test_strip_boundaries_searches_tail_after_banner():
    assert strip_boundaries("TAIL BANNER body TAIL", "BANNER", "TAIL") == " body "


def test_split_records_empty_payload():
    assert list(split_records("", "EventID")) == []
    assert list(split_records("\r\n\r\n\r\n\r\n\r\n", "EventID", "\r\n\r\n", "\r\n\r\n\r\n")) == []


def test_split_records_keeps_anchor_on_every_chunk():
    text = (
        "EventID : 1\r\nIndex : 10\r\n"
        "\r\n"
        "EventID : 2\r\nIndex : 11\r\n"
    )
    chunks = list(split_records(text, "EventID"))
    assert len(chunks) == 2
    assert all(c.startswith("EventID : ") for c in chunks)
    assert "Index : 11" in chunks[1]


def test_split_records_drops_text_before_first_anchor():
    text = "some prompt noise\r\nEventID : 1\r\nIndex : 10\r\n"
    chunks = list(split_records(text, "EventID"))
    assert chunks == ["EventID : 1\r\nIndex : 10\r\n"]


def test_split_records_ignores_anchor_inside_a_line():
    text = "Message : the EventID field\r\nId : 1\r\n"
    assert len(list(split_records(text, "Message"))) == 1
    assert list(split_records(text, "EventID")) == []


def test_split_records_is_lazy():
    gen = split_records("EventID : 1\r\n", "EventID")
    assert next(gen) == "EventID : 1\r\n"


# ---------- Decomposition ----------

def test_find_label_requires_line_start_and_colon():
    text = "Message : Logon Id changed\r\nIdentity : x\r\nId : 5\r\n"
    assert find_label(text, "Id") == text.index("Id : 5")
    assert find_label(text, "Source") == -1


def test_decompose_win_event():
    chunk = "Message : hello\r\n   more\r\nId : 4624\r\nRecordId : 7\r\n"
    message, kv = decompose_win_event(chunk)
    assert message == "Message : hello\r\n   more\r\n"
    assert kv == "Id : 4624\r\nRecordId : 7\r\n"


def test_decompose_win_event_without_id():
    with pytest.raises(MalformedChunkError) as exc:
        decompose_win_event("Message : hello\r\nRecordId : 7\r\n")
    assert "RecordId" in exc.value.chunk


def test_decompose_event_log_joins_key_ranges():
    chunk = (
        "EventID : 4624\r\nIndex : 3\r\n"
        "Message : hi\r\n  body\r\n"
        "Source : Auditing\r\nInstanceId : 4624\r\n"
    )
    message, kv = decompose_event_log(chunk)
    assert message == "Message : hi\r\n  body\r\n"
    assert kv == "EventID : 4624\r\nIndex : 3\r\nSource : Auditing\r\nInstanceId : 4624\r\n"


@pytest.mark.parametrize(
    "chunk",
    [
        "EventID : 1\r\nIndex : 3\r\nSource : x\r\n",
        "EventID : 1\r\nIndex : 3\r\nMessage : x\r\n",
        "EventID : 1\r\nSource : x\r\nMessage : hi\r\n",
    ],
)
def test_decompose_event_log_rejects_bad_chunks(chunk):
    with pytest.raises(MalformedChunkError):
        decompose_event_log(chunk)
