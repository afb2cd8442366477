from typing import Iterable, List

from collector.commons.types import BookingTableRow, OverviewCardItem


def _trend(count: int) -> str:
    return "up" if count > 0 else "down"


def build_booking_overview_cards(rows: Iterable[BookingTableRow]) -> List[OverviewCardItem]:
    """Total / Pending / Confirmed / Result Ready counters, always in that order."""
    rows = list(rows)
    total = len(rows)
    pending = sum(1 for row in rows if row.status == "Pending")
    active = sum(1 for row in rows if row.status == "Confirmed")
    completed = sum(1 for row in rows if row.status == "Result Ready")

    return [
        OverviewCardItem(
            title="Total Bookings",
            value=str(total),
            change="Live",
            summary="Bookings loaded from collector API",
            trend="up",
        ),
        OverviewCardItem(
            title="Pending Confirmation",
            value=str(pending),
            change="Live",
            summary="Requires confirmation from operations",
            trend=_trend(pending),
        ),
        OverviewCardItem(
            title="Active Bookings",
            value=str(active),
            change="Live",
            summary="Active bookings currently in execution window",
            trend=_trend(active),
        ),
        OverviewCardItem(
            title="Results Delivered",
            value=str(completed),
            change="Live",
            summary="Marked fulfilled and ready for patients",
            trend=_trend(completed),
        ),
    ]
