# Sandbox billing backend serving the envelopes the console consumes.

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from ukt_console.app.core.logging import configure_logging
from ukt_console.app.core.settings import get_settings
from ukt_console.sandbox.api import bills, categories, category_history, payments, status_logs, students
from ukt_console.sandbox.db import SessionLocal, create_tables
from ukt_console.sandbox.responses import http_exception_handler, validation_exception_handler
from ukt_console.sandbox.seed import dev_token, ensure_dev_data

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=f"{settings.app_name} sandbox", version=settings.api_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(students.router, prefix=API_PREFIX)
    app.include_router(categories.router, prefix=API_PREFIX)
    app.include_router(bills.router, prefix=API_PREFIX)
    app.include_router(payments.router, prefix=API_PREFIX)
    app.include_router(status_logs.router, prefix=API_PREFIX)
    app.include_router(category_history.router, prefix=API_PREFIX)

    @app.get("/")
    def read_root():
        return {"app": f"{settings.app_name} sandbox", "status": "ok"}

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.on_event("startup")
    def prepare_database():
        configure_logging()
        create_tables()
        db = SessionLocal()
        try:
            ensure_dev_data(db)
        finally:
            db.close()
        logger.info("Development bearer token: %s", dev_token())

    return app


app = create_app()
