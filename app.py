from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from dotenv import load_dotenv
from starlette.exceptions import HTTPException

from endpoints.validation import first_error_message
from persistence.errors import DuplicateIdError, NotFoundError, StorageError
from persistence.json_store import seed_json_file

logger = logging.getLogger(__name__)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"message": first_error_message(exc.errors())}, status_code=400)


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse({"message": "Not found"}, status_code=404)


async def _duplicate_handler(request: Request, exc: DuplicateIdError) -> JSONResponse:
    return JSONResponse({"message": str(exc)}, status_code=409)


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("STORAGE: %s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse({"message": "Storage error"}, status_code=500)


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.contacts import SETTINGS, router as contacts_router
    from endpoints.users import AVATARS_URL_PREFIX, router as users_router

    # The contact store expects its file to exist.
    if seed_json_file(SETTINGS.contacts_path, []):
        logger.info("CONTACTS INIT: created empty %s", SETTINGS.contacts_path)

    app = FastAPI(title="Contacts API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if SETTINGS.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            logger.debug(
                "HTTP %s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response

    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(DuplicateIdError, _duplicate_handler)
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(contacts_router)
    app.include_router(users_router)

    SETTINGS.avatars_dir.mkdir(parents=True, exist_ok=True)
    app.mount(AVATARS_URL_PREFIX, StaticFiles(directory=SETTINGS.avatars_dir), name="avatars")

    return app


app = create_app()
