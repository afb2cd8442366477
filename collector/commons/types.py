from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Wire types (collector API)
# ---------------------------------------------------------------------------


class CollectorReference(BaseModel):
    party_id: str
    display_name: str


class CollectorBookingPatient(BaseModel):
    model_config = ConfigDict(extra="allow")

    patient_id: str
    name: str
    age: Optional[int] = None
    gender: Optional[str] = None
    national_id: Optional[str] = None
    tests_count: Optional[int] = None


class CollectorBookingItem(BaseModel):
    """Raw booking record as returned by the collector API.

    booking_status is an open string: CREATED, ACTIVE, FULFILLED and CANCELLED are
    known, anything else must still validate.
    """

    model_config = ConfigDict(extra="allow")

    booking_id: int
    order_id: Optional[str] = None
    booking_status: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    start_at: str
    end_at: Optional[str] = None
    created_at: Optional[str] = None
    order_status: Optional[str] = None
    amount_expected_aed_fils: Optional[int] = None
    amount_captured_aed_fils: Optional[int] = None
    currency_expected: Optional[str] = None
    currency_captured: Optional[str] = None
    paid_at: Optional[str] = None
    patients: Optional[List[CollectorBookingPatient]] = None
    patient_count: Optional[int] = None


class CollectorBookingsResponse(BaseModel):
    collector: CollectorReference
    bucket: str  # "current" | "past"
    items: List[CollectorBookingItem] = []
    next_before_start_at: Optional[str] = None


class UpdateBookingPatientPayload(BaseModel):
    current_patient_id: str
    new_patient_id: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    national_id: Optional[str] = None


class UpdateBookingPatientsRequest(BaseModel):
    updates: List[UpdateBookingPatientPayload]


class PatientRemap(BaseModel):
    from_patient_id: str
    to_patient_id: str


class UpdateBookingPatientsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str  # "updated"
    booking_id: int
    order_id: Optional[str] = None
    collector: CollectorReference
    patients: List[CollectorBookingPatient] = []
    remap: Optional[List[PatientRemap]] = None


class MarkSampleCollectedRequest(BaseModel):
    event_id: Optional[str] = None
    collected_at: Optional[str] = None
    raw_event: Optional[Dict[str, Any]] = None


class MarkSampleCollectedResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str  # "started"
    event: Optional[str] = None
    booking_id: int
    order_id: Optional[str] = None
    booking_status: Optional[str] = None
    collector: CollectorReference
    workflow_run_id: Optional[str] = None
    temporal_workflow_id: Optional[str] = None
    temporal_run_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Display types
# ---------------------------------------------------------------------------

BookingStatus = Literal["Pending", "Confirmed", "Result Ready", "Cancelled", "Unknown"]
Trend = Literal["up", "down"]


class BookingPatient(BaseModel):
    model_config = ConfigDict(frozen=True)

    patient_id: str
    name: str
    age: Optional[int] = None
    gender: Optional[str] = None
    national_id: Optional[str] = None
    tests_count: Optional[int] = None


class BookingTableRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    booking_ref: str
    api_booking_id: int
    order_id: Optional[str] = None
    booking_status_raw: str
    status: BookingStatus
    order_status: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    start_at: str
    end_at: Optional[str] = None
    created_at: Optional[str] = None
    paid_at: Optional[str] = None
    patient_count: Optional[int] = None
    patient_name: str
    test_name: str
    date: str
    slot: str
    amount: float
    patients: List[BookingPatient] = Field(default_factory=list)


class OverviewCardItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    value: str
    change: str
    summary: str
    trend: Trend


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class ApiCfg(BaseModel):
    base_url: str = "https://api-staging.dardoc.com"
    timeout_sec: float = 20.0


class CollectorCfg(BaseModel):
    party_id: str = "BOOM_HEALTH"


class DisplayCfg(BaseModel):
    timezone: str = "Asia/Dubai"


class PathsCfg(BaseModel):
    logs_root: str = "logs"


class Settings(BaseModel):
    api: ApiCfg = ApiCfg()
    collector: CollectorCfg = CollectorCfg()
    display: DisplayCfg = DisplayCfg()
    paths: PathsCfg = PathsCfg()
