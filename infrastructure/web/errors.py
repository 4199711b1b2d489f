import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.use_cases.transaction_use_cases import TransactionValidationError


logger = logging.getLogger(__name__)


def _validation_response(errors: List[Dict[str, str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


def _field_from_loc(loc: Any) -> str:
    # ("body", "amount") -> "amount"; ("query", "startDate") -> "startDate"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"field": _field_from_loc(err.get("loc", ())), "message": err.get("msg", "")} for err in exc.errors()]
    logger.warning("request_rejected path=%s errors=%s", request.url.path, errors)
    return _validation_response(errors)


async def transaction_validation_handler(request: Request, exc: TransactionValidationError) -> JSONResponse:
    logger.warning("transaction_rejected path=%s field=%s", request.url.path, exc.field)
    return _validation_response([{"field": exc.field, "message": exc.message}])


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(TransactionValidationError, transaction_validation_handler)
