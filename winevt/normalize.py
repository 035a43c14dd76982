import re
from typing import Any, Dict, Mapping, Optional

from .errors import FieldCoercionError, RecordLayoutError
from .types import (
    EventMessage,
    EventRecord,
    FieldKind,
    IDENTITY_LABELS,
    SCHEMAS,
)


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Base-10 only: no whitespace, underscores or non-ASCII digits.
INT_TEXT = re.compile(r"^[+-]?[0-9]+$")


def coerce_int(field: str, value: str) -> int:
    """
    Parse `value` as a signed 64-bit decimal integer.

    Raises FieldCoercionError naming the field on failure.
    """
    if not INT_TEXT.match(value):
        raise FieldCoercionError(field, value)

    number = int(value)
    if number < INT64_MIN or number > INT64_MAX:
        raise FieldCoercionError(field, value)

    return number


def map_fields(
    fields: Mapping[str, str],
    record_type: type,
    message: Optional[EventMessage] = None,
) -> EventRecord:
    """
    Project a key/value mapping onto a record of `record_type`.

    This function must:
    - walk the record's static schema in order
    - leave unmapped fields at their zero value
    - never touch the nested Message field (it is injected as given)
    - refuse a record without its identity key

    Raises RecordLayoutError or FieldCoercionError.
    """
    schema = SCHEMAS[record_type]
    identity_label = IDENTITY_LABELS[record_type]

    if not fields.get(identity_label):
        raise RecordLayoutError(
            f"{record_type.__name__}: missing identity key {identity_label!r}"
        )

    values: Dict[str, Any] = {"message": message or EventMessage()}

    for spec in schema:
        raw = fields.get(spec.label)
        if not raw:
            continue

        if spec.kind == FieldKind.STRUCT:
            continue
        if spec.kind == FieldKind.STRING:
            values[spec.attr] = raw
        elif spec.kind == FieldKind.INT:
            values[spec.attr] = coerce_int(spec.label, raw)

    return record_type(**values)
