from collector.api.errors import ApiRequestError
from collector.api.presentation import get_error_presentation
from collector.bookings.currency import format_aed_amount


def test_network_presentation():
    p = get_error_presentation(Exception("Failed to fetch"))
    assert p.title == "Network Error"
    assert p.is_network_error is True
    assert p.description.startswith("Unable to reach the server")


def test_offline_presentation():
    p = get_error_presentation(ApiRequestError("whatever", status=500), is_offline=True)
    assert p.title == "Network Error"
    assert p.description.startswith("No internet connection")


def test_domain_message_is_shown():
    p = get_error_presentation(ApiRequestError("raw", status=409, code="booking_not_found"))
    assert p.title == "Unable to Load Page"
    assert p.description == "Booking was not found."
    assert p.is_network_error is False


def test_generic_message_with_status():
    p = get_error_presentation(ApiRequestError("Something went wrong", status=418))
    assert p.description == "Request failed with status 418. Please retry."


def test_generic_message_without_status():
    p = get_error_presentation(None)
    assert p.description == "Request could not be completed. Please retry."


def test_format_aed_amount():
    assert format_aed_amount(150.0) == "Ð 150.00"
    assert format_aed_amount(99.5) == "Ð 99.50"
    assert format_aed_amount("AED 120") == "Ð 120"
    assert format_aed_amount("د.إ 45") == "Ð 45"
    assert format_aed_amount("AED") == "Ð"
