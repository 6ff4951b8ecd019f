import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from boxoffice.domain.exceptions import AppError, NotFound, Conflict, Unprocessable, Unauthorized, InvalidInput, \
    Forbidden, InternalError
from boxoffice.core.ctx import REQUEST_ID_CTX

logger = logging.getLogger("boxoffice.api")

MEDIA_TYPE = "application/problem+json"
STORAGE_ERROR_MESSAGE = "Storage error, please try again"

_STATUS_BY_CLASS: dict[type[AppError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    Conflict: status.HTTP_409_CONFLICT,
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    Unprocessable: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AppError: status.HTTP_400_BAD_REQUEST,
}

_TITLES: dict[type[AppError], str] = {
    NotFound: "Not Found",
    Unauthorized: "Unauthorized",
    Forbidden: "Forbidden",
    Conflict: "Conflict",
    InvalidInput: "Bad Request",
    Unprocessable: "Unprocessable Entity",
    InternalError: "Internal Server Error",
    AppError: "Application Error",
}


def _www_authenticate_header(error_description: str | None = None) -> str:
    attributes = ['realm="api"', 'error="invalid_token"']
    if error_description:
        attributes.append(f'error_description="{error_description}"')
    return "Bearer " + ", ".join(attributes)


def _lookup(exc: AppError, table: dict, default):
    for cls in type(exc).mro():
        if cls in table:
            return table[cls]
    return default


def _problem(
    request: Request,
    *,
    http_status: int,
    title: str,
    detail: str | None = None,
    extra: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = {
        "status": http_status,
        "title": title,
        "detail": detail,
        "instance": str(request.url),
        "success": False,
        "message": detail or title,
    }
    req_id = REQUEST_ID_CTX.get()
    if req_id:
        body["trace_id"] = req_id
    if extra:
        body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=http_status, content=body, media_type=MEDIA_TYPE, headers=headers or {})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        status_code = _lookup(exc, _STATUS_BY_CLASS, status.HTTP_400_BAD_REQUEST)
        title = _lookup(exc, _TITLES, "Application Error")
        detail = str(exc) or None
        extra = {"code": exc.code, "context": exc.ctx or None}

        headers: dict[str, str] | None = None
        if isinstance(exc, Unauthorized):
            headers = {"WWW-Authenticate": _www_authenticate_header(detail)}
        if status_code >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, detail)

        return _problem(
            request,
            http_status=status_code,
            title=title,
            detail=detail,
            extra=extra,
            headers=headers
        )

    @app.exception_handler(SQLAlchemyError)
    async def _storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
        return _problem(
            request,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            title="Internal Server Error",
            detail=STORAGE_ERROR_MESSAGE,
            extra={"code": InternalError.code}
        )
