"""
Expense API endpoints and the error-to-HTTP mapping.

Repository errors arrive as `ExpenseError` subclasses; this module alone picks
the status code and how much of the error reaches the response body.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import errors, schemas
from .dependencies import get_repository, get_timeout
from .repository import ExpenseRepository

logger = logging.getLogger(__name__)

router = APIRouter()

# Every ExpenseError subclass must appear here (see tests/test_router.py).
STATUS_BY_ERROR: dict[type[errors.ExpenseError], int] = {
    errors.ValidationError: status.HTTP_400_BAD_REQUEST,
    errors.InvalidAmountError: status.HTTP_400_BAD_REQUEST,
    errors.InvalidRequestError: status.HTTP_400_BAD_REQUEST,
    errors.NotFoundError: status.HTTP_404_NOT_FOUND,
    errors.MissingIdError: status.HTTP_405_METHOD_NOT_ALLOWED,
    errors.IdGenerationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    errors.StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(status_code: int, body: schemas.ErrorBody) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_content())


def _opaque_error() -> JSONResponse:
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, schemas.ErrorBody())


async def expense_error_handler(request: Request, exc: errors.ExpenseError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        if isinstance(exc, errors.StoreError):
            logger.error(
                "store_error method=%s url=%s query=%s params=%r detail=%s",
                request.method,
                request.url.path,
                exc.query,
                exc.params,
                exc,
                exc_info=exc,
            )
        else:
            logger.error(
                "expense_error code=%s method=%s url=%s",
                exc.code,
                request.method,
                request.url.path,
                exc_info=exc,
            )
        return _opaque_error()

    logger.info("expense_rejected code=%s detail=%s", exc.code, exc)
    return _error_response(status_code, schemas.ErrorBody(code=exc.code, message=str(exc)))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("error on decode url=%s errors=%s", request.url.path, exc.errors())
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        schemas.ErrorBody(code=errors.InvalidRequestError.code, message="invalid request body"),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        url = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        body = schemas.ErrorBody(code="URL_NOT_FOUND", message=f"URL '{url}' not found")
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        body = schemas.ErrorBody(
            code="METHOD_NOT_ALLOWED",
            message=f"method {request.method} not allowed on '{request.url.path}'",
        )
    else:
        body = schemas.ErrorBody(message=str(exc.detail or ""))
    return JSONResponse(status_code=exc.status_code, content=body.to_content(), headers=exc.headers)


@router.post("/api/expense", response_model=schemas.CreatedResponse)
async def create_expense(
    payload: schemas.ExpenseIn = Body(...),
    repo: ExpenseRepository = Depends(get_repository),
    timeout: float | None = Depends(get_timeout),
) -> schemas.CreatedResponse:
    expense_id = await repo.create(payload.to_expense(), timeout=timeout)
    return schemas.CreatedResponse(id=expense_id)


@router.get(
    "/api/expense/{expense_id}",
    response_model=schemas.ExpenseOut,
    response_model_exclude_none=True,
)
async def get_expense(
    expense_id: str,
    repo: ExpenseRepository = Depends(get_repository),
    timeout: float | None = Depends(get_timeout),
) -> schemas.ExpenseOut:
    expense = await repo.get(expense_id, timeout=timeout)
    return schemas.ExpenseOut.from_expense(expense)


@router.patch("/api/expense/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_expense(
    expense_id: str,
    payload: schemas.ExpenseIn = Body(...),
    repo: ExpenseRepository = Depends(get_repository),
    timeout: float | None = Depends(get_timeout),
) -> Response:
    await repo.update(payload.to_expense(expense_id), timeout=timeout)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/api/expense/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: str,
    repo: ExpenseRepository = Depends(get_repository),
    timeout: float | None = Depends(get_timeout),
) -> Response:
    await repo.delete(expense_id, timeout=timeout)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
