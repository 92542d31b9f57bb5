import pytest

from attendance_ledger.core.enums import EventType


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("clockIn", EventType.CLOCK_IN),
        ("clock_out", EventType.CLOCK_OUT),
        ("BREAK_START", EventType.BREAK_START),
        ("breakEnd", EventType.BREAK_END),
        (EventType.CLOCK_IN, EventType.CLOCK_IN),
    ],
)
def test_parse_accepts_wire_and_camel_case(raw, expected):
    assert EventType.parse(raw) is expected


def test_parse_rejects_unknown():
    with pytest.raises(ValueError):
        EventType.parse("lunch")
