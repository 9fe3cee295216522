"""FastAPI dependencies for the generation routes.

The `GenerationService` is built once in the app lifespan and stored on
`app.state`. Tests replace it with `app.dependency_overrides`.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from .errors import ErrorKind, GenerationError
from .generation_service import GenerationService

HTTP_STATUS_BY_KIND = {
    ErrorKind.API_KEY_MISSING: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.NETWORK_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.PROVIDER_EMPTY_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.PROVIDER_OTHER: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.MALFORMED_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.EMPTY_RESULT: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DEADLINE_EXCEEDED: status.HTTP_504_GATEWAY_TIMEOUT,
}


def get_generation_service(request: Request) -> GenerationService:
    service = getattr(request.app.state, "generation_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Generation service is not initialized",
        )
    return service


def generation_http_error(exc: GenerationError, service: GenerationService) -> HTTPException:
    """Translate a pipeline failure into the HTTP error the UI renders."""
    return HTTPException(
        status_code=HTTP_STATUS_BY_KIND.get(exc.kind, status.HTTP_502_BAD_GATEWAY),
        detail={
            "error": exc.kind.value,
            "message": exc.user_message(service.settings.messages),
        },
    )
