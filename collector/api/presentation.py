from typing import Any

from pydantic import BaseModel

from collector.api.errors import get_api_error_message, to_api_request_error
from collector.api.network import is_likely_network_error

GENERIC_ERROR_MESSAGES = {
    "something went wrong",
    "application error",
    "unexpected error while calling booking api",
    "an unexpected error occurred while loading this page. please try again.",
    "the application hit an unexpected error. please retry.",
}


class ErrorPresentation(BaseModel):
    title: str
    description: str
    is_network_error: bool


def _is_generic_message(message: str) -> bool:
    return message.strip().lower() in GENERIC_ERROR_MESSAGES


def get_error_presentation(error: Any, is_offline: bool = False) -> ErrorPresentation:
    """Title + description for a page that failed to load."""
    api_error = to_api_request_error(error)
    is_network_error = is_offline or api_error.is_network_error or is_likely_network_error(error)

    if is_network_error:
        return ErrorPresentation(
            title="Network Error",
            description=(
                "No internet connection. Please check Wi-Fi or mobile data and retry."
                if is_offline
                else "Unable to reach the server. Check your connection and try again."
            ),
            is_network_error=True,
        )

    message = (get_api_error_message(api_error) or "").strip()
    if message and not _is_generic_message(message):
        return ErrorPresentation(
            title="Unable to Load Page", description=message, is_network_error=False
        )

    if api_error.status:
        return ErrorPresentation(
            title="Unable to Load Page",
            description=f"Request failed with status {api_error.status}. Please retry.",
            is_network_error=False,
        )

    return ErrorPresentation(
        title="Unable to Load Page",
        description="Request could not be completed. Please retry.",
        is_network_error=False,
    )
