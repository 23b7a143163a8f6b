from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import db
from core.config import load_settings
from core.log import configure_logging
from core.middleware import setup_middleware
from expenses import errors as expense_errors
from expenses import router as expenses_router
from expenses.ids import IdGenerator
from expenses.repository import ExpenseRepository

settings = load_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize the DB pool once per process.
    pool = await db.init_pool(settings)
    app.state.expense_repository = ExpenseRepository(
        pool,
        IdGenerator(),
        not_found_on_empty_update=settings.update_not_found,
    )
    try:
        yield
    finally:
        app.state.expense_repository = None
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

setup_middleware(app, request_timeout_s=settings.request_timeout_s)

app.add_exception_handler(expense_errors.ExpenseError, expenses_router.expense_error_handler)
app.add_exception_handler(RequestValidationError, expenses_router.request_validation_handler)
app.add_exception_handler(StarletteHTTPException, expenses_router.http_error_handler)

app.include_router(expenses_router.router, tags=["expenses"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "expense api"}


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
