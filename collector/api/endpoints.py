from typing import Union
from urllib.parse import quote


def _segment(value: Union[str, int]) -> str:
    # encodeURIComponent equivalent
    return quote(str(value), safe="!~*'()")


def current_bookings(collector_party_id: str) -> str:
    return f"/collectors/{_segment(collector_party_id)}/bookings/current"


def past_bookings(collector_party_id: str) -> str:
    return f"/collectors/{_segment(collector_party_id)}/bookings/past"


def booking_patients(collector_party_id: str, booking_id: Union[str, int]) -> str:
    return (
        f"/collectors/{_segment(collector_party_id)}"
        f"/bookings/{_segment(booking_id)}/patients"
    )


def sample_collected(collector_party_id: str, booking_id: Union[str, int]) -> str:
    return (
        f"/collectors/{_segment(collector_party_id)}"
        f"/bookings/{_segment(booking_id)}/sample-collected"
    )


def bookings_for_bucket(bucket: str, collector_party_id: str) -> str:
    if bucket == "current":
        return current_bookings(collector_party_id)
    if bucket == "past":
        return past_bookings(collector_party_id)
    raise ValueError(f"Unknown bookings bucket: {bucket!r}")
