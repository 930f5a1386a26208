import re
from typing import Annotated, Optional

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from src.shortener.core.exceptions import InvalidUrlError

# AnyUrl has no length cap, unlike HttpUrl
_http_url = TypeAdapter(
    Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]
)
_scheme_re = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(raw_url: str) -> str:
    """
    Validate a URL and return its canonical form.

    Args:
        raw_url: Candidate absolute URL

    Returns:
        Canonical string form of the URL (lower-cased host, default port
        removed, trailing slash on bare hosts, query and fragment kept)

    Raises:
        InvalidUrlError: If the URL cannot be parsed or is not http/https
    """
    try:
        parsed = _http_url.validate_python(raw_url)
    except ValidationError as e:
        error_types = {error["type"] for error in e.errors()}
        if "url_scheme" in error_types:
            raise InvalidUrlError(raw_url, "URL must use the http or https scheme")
        raise InvalidUrlError(raw_url, "Invalid URL")

    return str(parsed)


def coerce_redirect_target(url: str) -> str:
    """
    Turn a stored URL into a safe redirect target.

    Values without an http(s) scheme are assumed to be https.

    Raises:
        InvalidUrlError: If the result is still not a valid http/https URL
    """
    target = (url or "").strip()
    if not _scheme_re.match(target):
        target = f"https://{target}"
    return normalize_url(target)


def get_client_ip(request) -> Optional[str]:
    # First hop of X-Forwarded-For when behind a proxy
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
