from fastapi import Request
from fastapi.responses import JSONResponse

from sorting.core import exceptions as sort_exceptions
from sorting.logging import get_logger

logger = get_logger(__name__)


def _domain_error_handler(status_code: int, default_detail: str):
    def _handler(_: Request, exc: sort_exceptions.DomainError) -> JSONResponse:
        detail = str(exc) or default_detail
        if status_code >= 500:
            logger.error("sort_precondition_failed", detail=detail)
        return JSONResponse(status_code=status_code, content={"detail": detail})

    return _handler


def install(app) -> None:
    # descriptor rejected by policy -> 400, caller contract broken -> 500
    app.add_exception_handler(
        sort_exceptions.ValidationError, _domain_error_handler(400, "Bad Request")
    )
    app.add_exception_handler(
        sort_exceptions.PreconditionError,
        _domain_error_handler(500, "Internal Server Error"),
    )
