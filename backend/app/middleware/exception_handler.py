"""Exception handler for structured error responses."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from ..exceptions import SiteException, LoginRequiredError

logger = logging.getLogger(__name__)


async def site_exception_handler(request: Request, exc: SiteException) -> Response:
    """Convert a SiteException into its JSON body, or a redirect for dashboard logins.

    Client errors are logged at warning, server errors at error.
    """
    if isinstance(exc, LoginRequiredError):
        logger.info(
            "Redirecting unauthenticated dashboard request",
            extra={"path": request.url.path, "location": exc.location},
        )
        return RedirectResponse(url=exc.location, status_code=303)

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"SiteException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
