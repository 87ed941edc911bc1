from pydantic import HttpUrl, TypeAdapter, ValidationError

from links.exceptions import InvalidURLError

MAX_URL_LENGTH = 2048

http_url_adapter = TypeAdapter(HttpUrl)


def validate_url(url) -> str:
    """
    Check that ``url`` is an absolute http(s) URL with a host and return it
    with surrounding whitespace removed.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("URL is required")

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidURLError(f"URL is too long (max {MAX_URL_LENGTH} characters)")

    try:
        parsed = http_url_adapter.validate_python(url)
    except ValidationError as exc:
        raise InvalidURLError(f"Malformed URL: {exc.errors()[0]['msg']}") from exc

    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError("URL must use http or https")
    if not parsed.host:
        raise InvalidURLError("URL must have a host")

    return url
