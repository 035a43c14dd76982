class EventParseError(Exception):
    """
    Base class for record construction failures.

    Carries the raw chunk that failed so callers can report it.
    """

    def __init__(self, message: str, chunk: str = ""):
        super().__init__(message)
        self.chunk = chunk


class MalformedChunkError(EventParseError):
    """Anchor labels missing or out of order. The chunk is not a record."""


class RecordLayoutError(EventParseError):
    """The chunk looked like a record but its identity key is missing."""


class FieldCoercionError(EventParseError):
    def __init__(self, field: str, value: str, chunk: str = ""):
        super().__init__(
            f"field {field!r}: cannot parse {value!r} as int64", chunk
        )
        self.field = field
        self.value = value
