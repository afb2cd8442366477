"""Classification of collector API failures.

Every failure that leaves the gateway is converted into exactly one
``ApiRequestError``. Turning that structured error into a sentence for the user is a
separate step (``to_user_facing_message``) so the machine fields and the display text
can be tested on their own.
"""
import string
import time
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from collector.api.network import is_likely_network_error_message

DEFAULT_CONNECT_MESSAGE = "Failed to connect to booking API"
UNEXPECTED_ERROR_MESSAGE = "Unexpected error while calling booking API"

NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection and retry."
SERVER_UNAVAILABLE_MESSAGE = "Server is currently unavailable. Please try again in a moment."

STATUS_MESSAGES: Dict[int, str] = {
    401: "Your session has expired. Please sign in again.",
    403: "You do not have permission to perform this action.",
    404: "The requested resource was not found.",
    429: "Too many requests. Please wait a moment and retry.",
}

API_ERROR_MESSAGES: Dict[str, str] = {
    # collector / booking
    "invalid_collector_party_id": "Collector party ID is invalid.",
    "collector_not_found": "Collector not found.",
    "party_type_mismatch": "Configured party is not a COLLECTOR.",
    "collector_inactive": "Collector is inactive.",
    "invalid_booking_id": "Booking ID is invalid.",
    "booking_not_found": "Booking was not found.",
    "invalid_booking_state": "Booking is in a locked state and cannot be updated.",
    "booking_patients_not_found": "Patients could not be found for this booking snapshot.",
    "missing_patient_national_id": (
        "National ID is required for all patients before sample collection."
    ),
    "validation_error": "Provided booking details failed validation.",
    "patient_not_in_booking": "One or more patients do not belong to this booking.",
    "duplicate_patient_id_after_update": (
        "Updated patient IDs would create duplicates in the booking."
    ),
    # document scanner
    "invalid_document_type": "Invalid document type.",
    "file_required": "Image file is required.",
    "unsupported_file_type": "Only JPG, PNG, WEBP, HEIC, and HEIF images are supported.",
    "file_too_large": "Image is too large. Maximum allowed size is 8MB.",
    "document_not_configured": "Document processing is not configured.",
    "openai_request_failed": (
        "Unable to reach document scanner. Please check your connection and retry."
    ),
    "invalid_openai_response": "Invalid AI response. Please retry scanning.",
    "validation_failed": "Document details failed validation. Please recapture.",
    "timeout": "Document scan timed out. Please retry with a clearer image.",
    "document_not_clear": "Document not clear. Please recapture.",
}

_ERROR_ID_KEYS = ("error_id", "errorId", "request_id")
_BASE36 = string.digits + string.ascii_uppercase


class ErrorKind(str, Enum):
    NETWORK = "network"
    DOMAIN = "domain"
    SERVER = "server"
    CLIENT = "client"
    GENERIC = "generic"


class ApiRequestError(Exception):
    """Structured API error handed to the presentation layer."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
        is_network_error: bool = False,
        error_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details
        self.is_network_error = is_network_error
        self.error_id = error_id

    def __repr__(self) -> str:
        return (
            f"ApiRequestError(message={self.message!r}, status={self.status!r}, "
            f"code={self.code!r}, is_network_error={self.is_network_error!r}, "
            f"error_id={self.error_id!r})"
        )


def _to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_error_id(now_ms: Optional[int] = None) -> str:
    """Short, time based id for failures the server did not tag."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"ERR-{_to_base36(now_ms)}"


def _read_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        text = response.text
        return text or None


def _str_field(payload: Any, key: str) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    value = payload.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _payload_error_id(payload: Any) -> Optional[str]:
    for key in _ERROR_ID_KEYS:
        value = _str_field(payload, key)
        if value:
            return value
    return None


def _from_httpx_error(error: httpx.HTTPError) -> ApiRequestError:
    response: Optional[httpx.Response] = None
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response

    status = response.status_code if response is not None else None
    payload = _read_payload(response) if response is not None else None
    code = _str_field(payload, "error")
    body_message = _str_field(payload, "message")

    if response is not None:
        # httpx text carries the reason phrase and URL; only the body is inspected
        raw_message = f"Request failed with status code {status}"
        heuristic_text = body_message
    else:
        raw_message = str(error)
        heuristic_text = raw_message

    transport_failed = isinstance(error, (httpx.TimeoutException, httpx.NetworkError))
    is_network_error = (
        not status or transport_failed or is_likely_network_error_message(heuristic_text)
    )
    message = body_message or code or raw_message or DEFAULT_CONNECT_MESSAGE

    return ApiRequestError(
        message,
        status=status,
        code=code,
        details=payload,
        is_network_error=is_network_error,
        error_id=_payload_error_id(payload) or generate_error_id(),
    )


def to_api_request_error(error: Any) -> ApiRequestError:
    """Convert any failure value into an ``ApiRequestError``.

    Already structured errors come back unchanged (same instance).
    """
    if isinstance(error, ApiRequestError):
        return error

    if isinstance(error, httpx.HTTPError):
        return _from_httpx_error(error)

    if isinstance(error, BaseException):
        message = str(error)
        return ApiRequestError(
            message or UNEXPECTED_ERROR_MESSAGE,
            is_network_error=is_likely_network_error_message(message),
        )

    return ApiRequestError(UNEXPECTED_ERROR_MESSAGE)


def to_user_facing_message(error: ApiRequestError) -> str:
    if error.is_network_error:
        return NETWORK_ERROR_MESSAGE
    if error.code and error.code in API_ERROR_MESSAGES:
        return API_ERROR_MESSAGES[error.code]
    if error.status and error.status >= 500:
        return SERVER_UNAVAILABLE_MESSAGE
    if error.status in STATUS_MESSAGES:
        return STATUS_MESSAGES[error.status]
    return error.message


def classify_error_kind(error: Any) -> ErrorKind:
    """Taxonomy bucket, in the same priority order as the message resolution."""
    api_error = to_api_request_error(error)
    if api_error.is_network_error:
        return ErrorKind.NETWORK
    if api_error.code and api_error.code in API_ERROR_MESSAGES:
        return ErrorKind.DOMAIN
    if api_error.status and api_error.status >= 500:
        return ErrorKind.SERVER
    if api_error.status in STATUS_MESSAGES:
        return ErrorKind.CLIENT
    return ErrorKind.GENERIC


def get_api_error_message(error: Any) -> str:
    return to_user_facing_message(to_api_request_error(error))


def is_network_api_error(error: Any) -> bool:
    return bool(to_api_request_error(error).is_network_error)


def get_api_error_code(error: Any) -> Optional[str]:
    return to_api_request_error(error).code or None


def get_api_error_id(error: Any) -> Optional[str]:
    return to_api_request_error(error).error_id or None


def get_missing_patient_ids(error: Any) -> List[str]:
    """Patient ids listed by a ``missing_patient_national_id`` style failure."""
    details = to_api_request_error(error).details
    if not isinstance(details, dict):
        return []
    missing = details.get("missing_patient_ids")
    if not isinstance(missing, list):
        return []
    return [str(patient_id) for patient_id in missing]
