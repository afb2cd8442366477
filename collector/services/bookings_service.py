from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from collector.api.client import CollectorBookingsClient
from collector.bookings.mappers import DISPLAY_TIME_ZONE, map_collector_bookings
from collector.bookings.overview import build_booking_overview_cards
from collector.commons.logger import logger
from collector.commons.types import BookingTableRow, CollectorReference, OverviewCardItem


class BookingsPage(BaseModel):
    collector: CollectorReference
    bucket: str
    rows: List[BookingTableRow]
    cards: List[OverviewCardItem]
    next_before_start_at: Optional[str] = None


class BookingsService:
    """Fetch -> map -> aggregate. Holds no state between calls."""

    def __init__(self, client: CollectorBookingsClient, tz: ZoneInfo = DISPLAY_TIME_ZONE):
        self.client = client
        self.tz = tz

    async def load(
        self,
        bucket: str = "current",
        limit: Optional[int] = None,
        before_start_at: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
    ) -> BookingsPage:
        if bucket == "past":
            fetch = self.client.get_past_bookings
        else:
            fetch = self.client.get_current_bookings
        response = await fetch(limit=limit, before_start_at=before_start_at, statuses=statuses)

        rows = map_collector_bookings(response.items, self.tz)
        logger.info(
            f"{len(rows)} reserva(s) '{response.bucket}' para {response.collector.party_id}"
        )
        return BookingsPage(
            collector=response.collector,
            bucket=response.bucket,
            rows=rows,
            cards=build_booking_overview_cards(rows),
            next_before_start_at=response.next_before_start_at,
        )
