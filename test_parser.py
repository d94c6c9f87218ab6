"""End-to-end tests for batch parsing of packet logs."""

from datetime import datetime

import pytest

from scooter_telemetry import PacketParser, get_device_information, parse_device_info_only
from scooter_telemetry.parsing.errors import FieldCountMismatchError, RejectReason
from scooter_telemetry.schemas.registry import DEFAULT_REGISTRY, SchemaRegistry
from scooter_telemetry.utils.logging_utils import get_logger

logger = get_logger(__name__)

DEVICE_LINE = "+IN,DeviceInfo,860861040012977,86,5600,2021-01-14T15:05:10,0035$"
ERROR_LINE = (
    "+IN,Error,860861040012977,4,5,NoBattery,7,ECUFailure,8,Reboot,10,IotError,"
    "2021-01-14T19:05:10,0039$"
)

MIXED_FIXTURE = """+IN,DeviceInfo,860861040012977,86,5600,2021-01-14T15:05:10,0035$
AABBAA
+IN,DeviceInfo,860861040012977,34,5612,2021-01-14T18:30:10,0036$
CCDDEE
+IN,DeviceInfo,860861040012977,3,5623,2021-01-14T23:59:10,0037$
FFGGHH
NEXT LINE IS NOT A DeviceInfo Packet
+IN,NotDeviceInfo,860861040012978,3,5623,2021-01-14T23:59:10,0038$
NEXT LINE HAS INVALID IMEI field length < minLength
+IN,DeviceInfo,8,3,5623,2021-01-14T23:59:10,0039$
NEXT LINE HAS INVALID Date field type
+IN,DeviceInfo,860861040012978,3,5623,2021-01-14xT23:59:10,0040$
NEXT LINE HAS INVALID battery percentage field length > maxLength
+IN,DeviceInfo,860861040012978,3000,5623,2021-01-14T23:59:10,0041$
NEXT LINE HAS less than required number of fields
+IN,DeviceInfo,860861040012978,0041$
NEXT LINE HAS more than required number of fields
+IN,DeviceInfo,860861040012978,3,5623,2021-01-14T23:59:10,0041,0042$
+IN,Error,860861040012977,2,5,NoBattery,7,ECUFailure,2021-01-14T15:06:18,0036$
+IN,Error,860861040012977,1,7,ECUFailure,2021-01-14T15:09:18,0037$
+IN,Error,860861040012977,4,5,NoBattery,7,ECUFailure,8,Reboot,10,IotError,2021-01-14T19:05:10,0039$
+IN,Error,860861040012977,0,2021-01-14T19:05:10,0039$
"""


def _local(*args):
    return datetime(*args).astimezone()


def test_extracts_valid_error_and_device_info():
    records = get_device_information(f"{DEVICE_LINE}\n{ERROR_LINE}\n")

    assert records == [
        {
            "imei": "860861040012977",
            "batteryLevel": "86 %",
            "odometer": "5600 km",
            "time": _local(2021, 1, 14, 15, 5, 10),
        },
        {
            "imei": "860861040012977",
            "NoBattery": 5,
            "ECUFailure": 7,
            "Reboot": 8,
            "IotError": 10,
            "time": _local(2021, 1, 14, 19, 5, 10),
        },
    ]


def test_position_update_uses_device_layout():
    line = "+IN,PositionUpdate,860861040012977,50,1234,2021-01-15T08:00:00,0100$"
    assert get_device_information(line) == [
        {
            "imei": "860861040012977",
            "batteryLevel": "50 %",
            "odometer": "1234 km",
            "time": _local(2021, 1, 15, 8, 0, 0),
        }
    ]


def test_last_line_without_newline_is_parsed():
    assert len(get_device_information(DEVICE_LINE)) == 1


def test_ignores_unknown_packet_types():
    payload = (
        f"{DEVICE_LINE}\n{ERROR_LINE}\n"
        "+IN,NotDeviceInfo,860861040012977,86,5600,2021-01-14T15:05:10,0035$\n"
    )
    assert len(get_device_information(payload)) == 2


def test_packet_type_is_read_from_second_field():
    # Type tag in field 0 plays no part in schema lookup
    line = "+XYZ,DeviceInfo,860861040012977,86,5600,2021-01-14T15:05:10,0035$"
    assert len(get_device_information(line)) == 1


@pytest.mark.parametrize(
    "line",
    [
        "+IN,DeviceInfo,86,86,5600,2021-01-14T15:05:10,0035$",  # imei too short
        "+IN,DeviceInfo,860861040012977,8600,5600,2021-01-14T15:05:10,0035$",  # battery too long
        "+IN,DeviceInfo,860861040012977,86,,2021-01-14T15:05:10,0035$",  # empty odometer
        "+IN,DeviceInfo,860861040012977,86,5600,86,5600,2021-01-14T15:05:10,0035$",  # extra fields
        "+IN,DeviceInfo,2021-01-14T15:05:10,0035$",  # missing fields
        "+IN,DeviceInfo,8608610400129x7,86,5600,2021-01-14T15:05:10,0035$",  # imei not numeric
        "+IN,DeviceInfo,860861040012977,x,5600,2021-01-14T15:05:10,0035$",  # battery not numeric
        "+IN,DeviceInfo,860861040012977,86,56x0,2021-01-14T15:05:10,0035$",  # odometer not numeric
        "+IN,DeviceInfo,860861040012977,86,5600,2021-01-14x15:05:10,0035$",  # bad date
        "+IN,DeviceInfo,860861040012977,086,5600,2021-01-14T15:05:10,0035$",  # leading zero
        "+IN,Error,860861040012977,4,5,NoBattery,2021-01-14T19:05:10,0039$",  # too few pairs
        "+IN,Error,860861040012977,1,5,NoBattery,5,ECUKaput,2021-01-14T19:05:10,0039$",  # too many
        "+IN,Error,860861040012977,x,2021-01-14T19:05:10,0039$",  # non-numeric count
        "+IN,Error,860861040012977,-1,2021-01-14T19:05:10,0039$",  # negative count
        "+IN,Error,860861040012977,1,123,NoBattery,2021-01-14T19:05:10,0039$",  # code too long
        "IN,DeviceInfo,860861040012977,86,5600,2021-01-14T15:05:10,0035$",  # no start marker
        "+IN,DeviceInfo,860861040012977,86,5600,2021-01-14T15:05:10,0035",  # no end marker
        "+$",
        "+IN$",
    ],
)
def test_invalid_lines_yield_no_records(line):
    assert get_device_information(f"{line}\n") == []


@pytest.mark.parametrize("battery", ["0", "9", "100", "999"])
def test_battery_level_boundaries_accepted(battery):
    line = f"+IN,DeviceInfo,860861040012977,{battery},5600,2021-01-14T15:05:10,0035$"
    assert get_device_information(line) == [
        {
            "imei": "860861040012977",
            "batteryLevel": f"{battery} %",
            "odometer": "5600 km",
            "time": _local(2021, 1, 14, 15, 5, 10),
        }
    ]


def test_error_with_zero_count_parses():
    records = get_device_information("+IN,Error,860861040012977,0,2021-01-14T19:05:10,0039$\n")
    assert records == [{"imei": "860861040012977", "time": _local(2021, 1, 14, 19, 5, 10)}]


def test_mixed_fixture_yields_seven_records():
    records = get_device_information(MIXED_FIXTURE)

    assert len(records) == 7
    assert [r["time"] for r in records] == [
        _local(2021, 1, 14, 15, 5, 10),
        _local(2021, 1, 14, 18, 30, 10),
        _local(2021, 1, 14, 23, 59, 10),
        _local(2021, 1, 14, 15, 6, 18),
        _local(2021, 1, 14, 15, 9, 18),
        _local(2021, 1, 14, 19, 5, 10),
        _local(2021, 1, 14, 19, 5, 10),
    ]


def test_mixed_fixture_stats():
    records, stats = PacketParser().parse_with_stats(MIXED_FIXTURE)
    logger.info(f"Mixed fixture stats: {stats.to_dict()}")

    assert len(records) == stats.accepted_lines == 7
    assert stats.total_lines == 22
    assert stats.blank_lines == 0
    assert stats.rejected_lines == 15
    assert stats.rejected_by_reason == {
        RejectReason.FRAMING_INVALID.value: 9,
        RejectReason.UNKNOWN_PACKET_TYPE.value: 1,
        RejectReason.FIELD_LENGTH_OUT_OF_RANGE.value: 3,
        RejectReason.FIELD_COUNT_MISMATCH.value: 2,
    }
    assert stats.accepted_by_packet_type == {"DeviceInfo": 3, "Error": 4}
    assert stats.acceptance_rate == pytest.approx(700 / 22)

    as_dict = stats.to_dict()
    assert as_dict["accepted_lines"] == 7
    assert as_dict["processing_time_sec"] >= 0


def test_stats_count_conversion_and_repeat_failures():
    payload = "\n".join(
        [
            "+IN,DeviceInfo,8608610400129x7,86,5600,2021-01-14T15:05:10,0035$",
            "+IN,Error,860861040012977,x,2021-01-14T19:05:10,0039$",
            "",
            DEVICE_LINE,
        ]
    )
    records, stats = PacketParser().parse_with_stats(payload)

    assert len(records) == 1
    assert stats.blank_lines == 1
    assert stats.rejected_by_reason == {
        RejectReason.FIELD_CONVERSION_FAILED.value: 1,
        RejectReason.INVALID_REPEAT_COUNT.value: 1,
    }


def test_stats_and_plain_parse_return_same_records():
    parser = PacketParser()
    records, _ = parser.parse_with_stats(MIXED_FIXTURE)
    assert parser.parse(MIXED_FIXTURE) == records


def test_only_malformed_lines_gives_empty_result():
    assert get_device_information("AABBAA\nCCDDEE\n+IN,Nope$\n") == []
    assert get_device_information("") == []


def test_parsing_is_idempotent():
    parser = PacketParser()
    first = parser.parse(MIXED_FIXTURE)
    second = parser.parse(MIXED_FIXTURE)

    assert first == second
    assert first is not second


def test_parse_line_raises_for_invalid_line():
    parser = PacketParser()

    packet_type, record = parser.parse_line(DEVICE_LINE)
    assert packet_type == "DeviceInfo"
    assert record["imei"] == "860861040012977"

    with pytest.raises(FieldCountMismatchError):
        parser.parse_line("+IN,DeviceInfo,860861040012978,0041$")


def test_device_info_only_parser_skips_other_packet_types():
    records = parse_device_info_only(MIXED_FIXTURE)

    assert len(records) == 3
    assert all(set(r) == {"imei", "batteryLevel", "odometer", "time"} for r in records)


def test_packet_type_filter():
    records = get_device_information(MIXED_FIXTURE, packet_types=["Error"])
    assert len(records) == 4


def test_custom_registry():
    registry = SchemaRegistry.from_dict(
        {
            "Ping": [
                {"name": "type", "min_length": 2, "max_length": 3},
                {"name": "instruction", "min_length": 1, "max_length": 10},
                {
                    "name": "seq",
                    "min_length": 1,
                    "max_length": 4,
                    "value_format": "integer",
                    "include_in_record": True,
                },
            ]
        }
    )
    payload = f"+IN,Ping,42$\n{DEVICE_LINE}\n"

    assert get_device_information(payload, registry=registry) == [{"seq": 42}]
    assert PacketParser(registry).parse(payload) == [{"seq": 42}]


def test_default_registry_is_used_when_none_given():
    assert PacketParser().registry is DEFAULT_REGISTRY
