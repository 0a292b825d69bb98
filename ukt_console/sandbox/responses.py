"""Response envelopes and error handlers for the sandbox backend."""

from typing import Any, Dict, Iterable, List

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

VALIDATION_MESSAGE = "The given data was invalid."


def serialize(obj) -> Dict[str, Any]:
    return jsonable_encoder({column.key: getattr(obj, column.key) for column in obj.__table__.columns})


def success(data: Any = None, message: str | None = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": "success", "data": data}
    if message:
        body["message"] = message
    return body


def listing(rows: Iterable) -> Dict[str, Any]:
    return success([serialize(row) for row in rows])


def paginated(rows: Iterable) -> Dict[str, Any]:
    items = [serialize(row) for row in rows]
    return success({"current_page": 1, "data": items, "total": len(items)})


def domain_error(message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    # The billing backend reports some rejections with a 200 and an error marker.
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


def field_errors(errors: Dict[str, List[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"status": "error", "message": VALIDATION_MESSAGE, "errors": errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = location[-1] if location else "request"
        errors.setdefault(field, []).append(f"{field}: {error.get('msg', 'invalid value')}")
    return field_errors(errors)
