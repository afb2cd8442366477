"""Async HTTP gateway for the collector bookings API.

One request per call, bounded by a fixed timeout, no retries. Any failure is
classified and raised as ``ApiRequestError``.
"""
import time
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

import httpx
from pydantic import BaseModel

from collector.api import endpoints
from collector.api.errors import to_api_request_error
from collector.commons.telemetry import capture_observed_error, track_api_telemetry
from collector.commons.types import (
    CollectorBookingsResponse,
    MarkSampleCollectedRequest,
    MarkSampleCollectedResponse,
    UpdateBookingPatientPayload,
    UpdateBookingPatientsRequest,
    UpdateBookingPatientsResponse,
)

DEFAULT_TIMEOUT_SEC = 20.0
MAX_LIST_LIMIT = 200

ModelT = TypeVar("ModelT", bound=BaseModel)


def clamp_limit(limit: Optional[int]) -> Optional[int]:
    if not limit:
        return None
    return min(max(limit, 1), MAX_LIST_LIMIT)


def build_bookings_params(
    limit: Optional[int] = None,
    before_start_at: Optional[str] = None,
    statuses: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    clamped = clamp_limit(limit)
    if clamped:
        params["limit"] = clamped
    if before_start_at:
        params["before_start_at"] = before_start_at
    if statuses:
        params["status"] = ",".join(statuses)
    return params


class CollectorBookingsClient:
    def __init__(
        self,
        base_url: str,
        collector_party_id: str,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.collector_party_id = collector_party_id
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "CollectorBookingsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json", "Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        model: Type[ModelT],
        area: str,
        metadata: Dict[str, Any],
        **kwargs: Any,
    ) -> ModelT:
        started = time.perf_counter()
        status_code: Optional[int] = None
        try:
            response = await self._get_client().request(method, endpoint, **kwargs)
            status_code = response.status_code
            response.raise_for_status()
            result = model.model_validate(response.json())
        except Exception as ex:
            api_error = to_api_request_error(ex)
            track_api_telemetry(
                endpoint,
                (time.perf_counter() - started) * 1000,
                success=False,
                status_code=api_error.status or status_code,
                error_code=api_error.code or type(ex).__name__,
                metadata={"method": method},
            )
            capture_observed_error(
                api_error,
                area,
                {
                    **metadata,
                    "code": api_error.code,
                    "status": api_error.status,
                    "error_id": api_error.error_id,
                },
            )
            raise api_error from ex

        track_api_telemetry(
            endpoint,
            (time.perf_counter() - started) * 1000,
            success=True,
            status_code=status_code,
            metadata={"method": method},
        )
        return result

    async def _fetch_bookings(
        self,
        bucket: str,
        limit: Optional[int] = None,
        before_start_at: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
        collector_party_id: Optional[str] = None,
    ) -> CollectorBookingsResponse:
        party_id = collector_party_id or self.collector_party_id
        return await self._request(
            "GET",
            endpoints.bookings_for_bucket(bucket, party_id),
            CollectorBookingsResponse,
            area="collector_bookings_fetch",
            metadata={"bucket": bucket, "collector_party_id": party_id},
            params=build_bookings_params(limit, before_start_at, statuses),
        )

    async def get_current_bookings(self, **query: Any) -> CollectorBookingsResponse:
        return await self._fetch_bookings("current", **query)

    async def get_past_bookings(self, **query: Any) -> CollectorBookingsResponse:
        return await self._fetch_bookings("past", **query)

    async def update_booking_patients(
        self,
        booking_id: Union[str, int],
        updates: List[Union[UpdateBookingPatientPayload, Dict[str, Any]]],
        collector_party_id: Optional[str] = None,
    ) -> UpdateBookingPatientsResponse:
        if not updates:
            raise to_api_request_error(ValueError("At least one patient update is required"))

        party_id = collector_party_id or self.collector_party_id
        request = UpdateBookingPatientsRequest(updates=updates)
        return await self._request(
            "PATCH",
            endpoints.booking_patients(party_id, booking_id),
            UpdateBookingPatientsResponse,
            area="collector_booking_patients_update",
            metadata={"booking_id": str(booking_id), "collector_party_id": party_id},
            json=request.model_dump(exclude_none=True),
        )

    async def mark_sample_collected(
        self,
        booking_id: Union[str, int],
        event_id: Optional[str] = None,
        collected_at: Optional[str] = None,
        raw_event: Optional[Dict[str, Any]] = None,
        collector_party_id: Optional[str] = None,
    ) -> MarkSampleCollectedResponse:
        party_id = collector_party_id or self.collector_party_id
        request = MarkSampleCollectedRequest(
            event_id=event_id or None,
            collected_at=collected_at or None,
            raw_event=raw_event or None,
        )
        # campos vacios no se envian; raw_event viaja tal cual
        payload = {
            key: value for key, value in request.model_dump().items() if value is not None
        }
        return await self._request(
            "PATCH",
            endpoints.sample_collected(party_id, booking_id),
            MarkSampleCollectedResponse,
            area="collector_booking_sample_collected",
            metadata={"booking_id": str(booking_id), "collector_party_id": party_id},
            json=payload,
        )
