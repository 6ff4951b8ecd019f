from boxoffice.core.utils.serialization import normalize_ctx


class AppError(Exception):
    code = "error"

    def __init__(self, message: str = "", *, ctx: dict | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.ctx = normalize_ctx(ctx or {})


class NotFound(AppError):
    code = "not_found"
class Unauthorized(AppError):
    code = "unauthenticated"
class Forbidden(AppError):
    code = "forbidden"
class Conflict(AppError):
    code = "conflict"
class InvalidInput(AppError):
    code = "invalid_input"
class Unprocessable(AppError):
    code = "unprocessable"
class InternalError(AppError):
    code = "internal_error"


class InvalidTicketFormat(InvalidInput):
    code = "invalid_format"
class TicketNotFoundForConcert(NotFound):
    code = "not_found_for_concert"
class AlreadyCheckedIn(Conflict):
    code = "already_checked_in"
class SoldOut(Conflict):
    code = "insufficient_inventory"
