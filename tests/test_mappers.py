import pytest

from collector.bookings.mappers import (
    format_date,
    format_slot,
    map_booking_status,
    map_collector_booking_to_table_row,
    map_collector_bookings,
)
from collector.commons.types import CollectorBookingItem

BASE = {
    "booking_id": 42,
    "booking_status": "CREATED",
    "start_at": "2024-01-01T09:00:00Z",
}


def make(**kw):
    return {**BASE, **kw}


def test_end_to_end_row():
    raw = {
        "booking_id": 7,
        "booking_status": "ACTIVE",
        "start_at": "2024-01-01T09:00:00Z",
        "amount_expected_aed_fils": 15000,
        "patients": [{"patient_id": "p1", "name": "Jane", "tests_count": 2}],
    }
    row = map_collector_booking_to_table_row(raw)
    assert row.booking_ref == "BK-7"
    assert row.status == "Confirmed"
    assert row.amount == 150.00
    assert row.patient_name == "Jane"
    assert row.test_name == "2 Tests"
    assert row.booking_status_raw == "ACTIVE"
    # Asia/Dubai = UTC+4
    assert row.date == "01 Jan 2024"
    assert row.slot == "13:00"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("CREATED", "Pending"),
        ("ACTIVE", "Confirmed"),
        ("FULFILLED", "Result Ready"),
        ("CANCELLED", "Cancelled"),
        ("created", "Pending"),
        ("fulfilled", "Result Ready"),
        ("REFUNDED", "Unknown"),
        ("", "Unknown"),
        ("IN_LAB", "Unknown"),
        (None, "Unknown"),
    ],
)
def test_status_mapping(raw, expected):
    assert map_booking_status(raw) == expected


def test_unknown_status_row_does_not_raise():
    row = map_collector_booking_to_table_row(make(booking_status="SOMETHING_NEW"))
    assert row.status == "Unknown"
    assert row.booking_status_raw == "SOMETHING_NEW"


def test_reference_prefers_order_id():
    assert map_collector_booking_to_table_row(make(order_id="BH-1001")).booking_ref == "BH-1001"
    assert map_collector_booking_to_table_row(make()).booking_ref == "BK-42"
    row = map_collector_booking_to_table_row(make(order_id=""))
    assert row.booking_ref == "BK-42"
    assert row.order_id is None


def test_name_label():
    assert map_collector_booking_to_table_row(make()).patient_name == "Patient"
    assert map_collector_booking_to_table_row(make(patients=[])).patient_name == "Patient"
    patients = [{"patient_id": str(i), "name": n} for i, n in enumerate(["A", "B", "C"])]
    assert map_collector_booking_to_table_row(make(patients=patients)).patient_name == "A +2"


def test_test_label():
    patients = [
        {"patient_id": "1", "name": "A", "tests_count": 2},
        {"patient_id": "2", "name": "B", "tests_count": 0},
        {"patient_id": "3", "name": "C", "tests_count": 1},
    ]
    assert map_collector_booking_to_table_row(make(patients=patients)).test_name == "3 Tests"

    single = [{"patient_id": "1", "name": "A", "tests_count": 1}]
    assert map_collector_booking_to_table_row(make(patients=single)).test_name == "1 Test"

    zero = [{"patient_id": "1", "name": "A", "tests_count": 0}, {"patient_id": "2", "name": "B"}]
    assert map_collector_booking_to_table_row(make(patients=zero)).test_name == "Lab Test"

    negative = [{"patient_id": "1", "name": "A", "tests_count": -3}]
    assert map_collector_booking_to_table_row(make(patients=negative)).test_name == "Lab Test"


def test_patients_keep_every_key():
    row = map_collector_booking_to_table_row(
        make(patients=[{"patient_id": "p1", "name": "Jane"}])
    )
    dumped = row.patients[0].model_dump()
    assert dumped == {
        "patient_id": "p1",
        "name": "Jane",
        "age": None,
        "gender": None,
        "national_id": None,
        "tests_count": None,
    }


def test_amount_priority_and_rounding():
    captured = make(amount_expected_aed_fils=15000, amount_captured_aed_fils=12345)
    assert map_collector_booking_to_table_row(captured).amount == 123.45

    zero_captured = make(amount_expected_aed_fils=9950, amount_captured_aed_fils=0)
    assert map_collector_booking_to_table_row(zero_captured).amount == 99.5

    assert map_collector_booking_to_table_row(make()).amount == 0

    odd = make(amount_expected_aed_fils=1)
    assert map_collector_booking_to_table_row(odd).amount == round(1 / 100, 2)


def test_amount_is_stable_when_mapped_twice():
    raw = make(amount_expected_aed_fils=10005, amount_captured_aed_fils=None)
    first = map_collector_booking_to_table_row(raw)
    second = map_collector_booking_to_table_row(raw)
    assert first.amount == second.amount == round(10005 / 100, 2)
    assert first == second


def test_invalid_timestamp_is_returned_unchanged():
    row = map_collector_booking_to_table_row(make(start_at="not-a-date"))
    assert row.date == "not-a-date"
    assert row.slot == "not-a-date"


def test_slot_with_end_time():
    row = map_collector_booking_to_table_row(
        make(start_at="2024-01-01T05:30:00Z", end_at="2024-01-01T06:15:00Z")
    )
    assert row.slot == "09:30-10:15"


def test_slot_with_invalid_end_time_keeps_raw_end():
    assert format_slot("2024-01-01T05:30:00Z", "later") == "09:30-later"


def test_date_crosses_midnight_in_display_zone():
    assert format_date("2024-03-31T21:00:00Z") == "01 Apr 2024"
    assert format_date("2024-03-31T21:00:00+04:00") == "31 Mar 2024"


def test_naive_timestamp_read_as_utc():
    assert format_slot("2024-01-01T09:00:00") == "13:00"


def test_accepts_model_and_keeps_raw_fields():
    item = CollectorBookingItem(
        booking_id=9,
        booking_status="FULFILLED",
        resource_type="HOME_VISIT",
        resource_id="slot-1",
        start_at="2024-01-01T09:00:00Z",
        created_at="2023-12-31T09:00:00Z",
        paid_at="2024-01-01T10:00:00Z",
        patient_count=3,
    )
    row = map_collector_booking_to_table_row(item)
    assert row.resource_type == "HOME_VISIT"
    assert row.resource_id == "slot-1"
    assert row.start_at == "2024-01-01T09:00:00Z"
    assert row.created_at == "2023-12-31T09:00:00Z"
    assert row.paid_at == "2024-01-01T10:00:00Z"
    assert row.patient_count == 3
    assert row.end_at is None


def test_rows_are_frozen():
    row = map_collector_booking_to_table_row(make())
    with pytest.raises(Exception):
        row.amount = 1.0


def test_map_many():
    rows = map_collector_bookings([make(booking_id=1), make(booking_id=2)])
    assert [r.booking_ref for r in rows] == ["BK-1", "BK-2"]


@pytest.mark.parametrize("value", ["9999-12-31T23:00:00Z", "0001-01-01T00:00:00+05:00"])
def test_out_of_range_instant_is_returned_unchanged(value):
    row = map_collector_booking_to_table_row(make(start_at=value))
    assert row.date == value
    assert row.slot == value


def test_out_of_range_end_time_keeps_raw_end():
    assert format_slot("2024-01-01T05:30:00Z", "9999-12-31T23:00:00Z") == "09:30-9999-12-31T23:00:00Z"
