"""Raw collector booking records -> display rows.

The mapper is total: any combination of missing optional fields maps to a row, and
timestamps that do not parse are shown as they came in.
"""
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union
from zoneinfo import ZoneInfo

from collector.commons.types import (
    BookingPatient,
    BookingStatus,
    BookingTableRow,
    CollectorBookingItem,
)

DISPLAY_TIME_ZONE = ZoneInfo("Asia/Dubai")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_STATUS_MAP = {
    "CREATED": "Pending",
    "ACTIVE": "Confirmed",
    "FULFILLED": "Result Ready",
    "CANCELLED": "Cancelled",
}

RawBooking = Union[CollectorBookingItem, Mapping[str, Any]]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """ISO-8601 -> aware datetime, or None when it is not a valid instant.

    Timestamps without an offset are read as UTC.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_display_time(value: Optional[str], tz: ZoneInfo = DISPLAY_TIME_ZONE) -> Optional[datetime]:
    """Parsed instant in the display zone, or None if it cannot be shown there."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    try:
        return parsed.astimezone(tz)
    except (OverflowError, ValueError):
        # e.g. 9999-12-31T23:00:00Z pasa de año 9999 en Dubai
        return None


def format_date(value: str, tz: ZoneInfo = DISPLAY_TIME_ZONE) -> str:
    local = to_display_time(value, tz)
    if local is None:
        return value
    return f"{local.day:02d} {_MONTHS[local.month - 1]} {local.year}"


def format_time(value: str, tz: ZoneInfo = DISPLAY_TIME_ZONE) -> str:
    local = to_display_time(value, tz)
    if local is None:
        return value
    return local.strftime("%H:%M")


def format_slot(start_at: str, end_at: Optional[str] = None, tz: ZoneInfo = DISPLAY_TIME_ZONE) -> str:
    if not end_at:
        return format_time(start_at, tz)
    return f"{format_time(start_at, tz)}-{format_time(end_at, tz)}"


def map_booking_status(status: Optional[str]) -> BookingStatus:
    """Unknown upstream statuses map to "Unknown", never raise."""
    if not isinstance(status, str):
        return "Unknown"
    return _STATUS_MAP.get(status.strip().upper(), "Unknown")


def map_patients(item: CollectorBookingItem) -> List[BookingPatient]:
    return [
        BookingPatient(
            patient_id=patient.patient_id,
            name=patient.name,
            age=patient.age,
            gender=patient.gender,
            national_id=patient.national_id,
            tests_count=patient.tests_count,
        )
        for patient in item.patients or []
    ]


def map_patient_name(patients: List[BookingPatient]) -> str:
    primary = (patients[0].name if patients else "") or "Patient"
    additional = max(0, len(patients) - 1)
    if additional > 0:
        return f"{primary} +{additional}"
    return primary


def map_test_name(patients: List[BookingPatient]) -> str:
    total = sum(max(patient.tests_count or 0, 0) for patient in patients)
    if total <= 0:
        return "Lab Test"
    return f"{total} {'Test' if total == 1 else 'Tests'}"


def map_amount_aed(item: CollectorBookingItem) -> float:
    """Captured amount wins when positive, else expected, else 0. Fils -> AED."""
    captured = item.amount_captured_aed_fils or 0
    expected = item.amount_expected_aed_fils or 0
    fils = captured if captured > 0 else expected
    return round(fils / 100, 2)


def booking_reference(item: CollectorBookingItem) -> str:
    return item.order_id or f"BK-{item.booking_id}"


def map_collector_booking_to_table_row(
    raw: RawBooking, tz: ZoneInfo = DISPLAY_TIME_ZONE
) -> BookingTableRow:
    item = raw if isinstance(raw, CollectorBookingItem) else CollectorBookingItem.model_validate(raw)
    patients = map_patients(item)

    return BookingTableRow(
        booking_ref=booking_reference(item),
        api_booking_id=item.booking_id,
        order_id=item.order_id or None,
        booking_status_raw=item.booking_status,
        status=map_booking_status(item.booking_status),
        order_status=item.order_status,
        resource_type=item.resource_type,
        resource_id=item.resource_id,
        start_at=item.start_at,
        end_at=item.end_at,
        created_at=item.created_at,
        paid_at=item.paid_at,
        patient_count=item.patient_count,
        patient_name=map_patient_name(patients),
        test_name=map_test_name(patients),
        date=format_date(item.start_at, tz),
        slot=format_slot(item.start_at, item.end_at, tz),
        amount=map_amount_aed(item),
        patients=patients,
    )


def map_collector_bookings(
    items: List[RawBooking], tz: ZoneInfo = DISPLAY_TIME_ZONE
) -> List[BookingTableRow]:
    return [map_collector_booking_to_table_row(item, tz) for item in items]
