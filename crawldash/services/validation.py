from urllib.parse import urlparse

from crawldash.errors import InputValidationError

ALLOWED_SCHEMES = {"http", "https"}

URL_REQUIRED_MESSAGE = "URL is required"
INVALID_URL_MESSAGE = "Please enter a valid HTTP or HTTPS URL"


def validate_url(raw: str) -> str:
    """Return the trimmed URL or raise :class:`InputValidationError`."""
    url = (raw or "").strip()
    if not url:
        raise InputValidationError(URL_REQUIRED_MESSAGE)

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        raise InputValidationError(INVALID_URL_MESSAGE) from None

    if parsed.scheme not in ALLOWED_SCHEMES or not hostname:
        raise InputValidationError(INVALID_URL_MESSAGE)
    return url
