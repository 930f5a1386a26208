from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from src.shortener.api.deps import get_url_service
from src.shortener.api.errors import error_response
from src.shortener.core.config import Settings, get_settings, logger
from src.shortener.core.exceptions import InternalError, ShortenerError
from src.shortener.core.validators import coerce_redirect_target, get_client_ip
from src.shortener.services.url_service import URLService

router = APIRouter()


def wants_json_preview(request: Request, detect_probes: bool = True) -> bool:
    """
    Decide whether to describe the redirect in JSON instead of issuing it.

    ``?format=json`` and ``?preview=true`` always ask for JSON. With
    ``detect_probes`` the request headers are also checked for signs of an
    API documentation page or script calling the endpoint.
    """
    params = request.query_params
    if params.get("format", "").lower() == "json" or params.get("preview", "").lower() == "true":
        return True
    if not detect_probes:
        return False

    headers = request.headers
    user_agent = headers.get("user-agent", "").lower()
    accept = headers.get("accept", "").lower()
    referer = headers.get("referer", "").lower()
    return (
        "swagger" in user_agent
        or "application/json" in accept
        or any(marker in referer for marker in ("/docs", "/api", "swagger"))
        or headers.get("x-requested-with", "") == "XMLHttpRequest"
    )


@router.get("/{short_code}", tags=["redirect"])
def redirect_to_url(
    short_code: str,
    request: Request,
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings),
):
    """
    Redirect to the original URL and record the click.

    Documentation and tooling requests get a JSON description of the
    redirect instead. Errors are always returned as JSON bodies.
    """
    try:
        original_url = url_service.resolve_and_record_click(
            short_code,
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
        target = coerce_redirect_target(original_url)
    except ShortenerError as e:
        if e.status_code >= 500:
            logger.error(f"Redirect for {short_code} failed: {e.message}")
        return error_response(e)
    except Exception:
        logger.exception(f"Redirect for {short_code} failed")
        return error_response(InternalError())

    if wants_json_preview(request, settings.REDIRECT_PROBE_DETECTION):
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "message": "Redirect simulated for API tooling",
                "originalUrl": target,
                "shortCode": short_code,
                "redirectUrl": target,
                "clickRegistered": True,
                "note": f"Open {request.base_url}{short_code} in a browser to follow the redirect",
            },
        )

    return RedirectResponse(target, status_code=status.HTTP_302_FOUND)
