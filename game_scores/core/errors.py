from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..logger import get_logger
from ..models.result import Failure, FieldError, Result, is_success
from ..models.score import MAX_INT_SCORE, MIN_INT_SCORE

logger = get_logger()


def failure_response(failure: Failure) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=failure.status,
        content=failure.model_dump(mode="json", include={"message", "errors"}, exclude_none=True),
    )


def result_response(result: Result) -> ORJSONResponse:
    """Render a Result: the payload on success, message and field errors otherwise"""
    if is_success(result):
        return ORJSONResponse(status_code=result.status, content=_jsonable(result.data))
    return failure_response(result)


def _jsonable(data):
    if isinstance(data, list):
        return [_jsonable(item) for item in data]
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    return data


def _field_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query" prefix FastAPI puts in front of the field path
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        value = err.get("input")
        errors.append(FieldError(
            field=".".join(loc) or None,
            message=err.get("msg", "Invalid value"),
            value=value if _echoable(value) else None,
        ))
    return errors


def _echoable(value) -> bool:
    # orjson only serializes 64-bit integers
    if isinstance(value, int) and not isinstance(value, bool):
        return MIN_INT_SCORE <= value <= MAX_INT_SCORE
    return isinstance(value, (str, float, bool))


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
        return failure_response(Failure(status=400, message="Invalid request", errors=_field_errors(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return ORJSONResponse(status_code=500, content={"message": "Internal server error"})
