import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookworm.db import CatalogStore
from bookworm.errors import BookwormError
from bookworm.routers.recommend import router as recommend_router

logger = logging.getLogger(__name__)


def handle_bookworm_error(request: Request, exc: BookwormError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": str(exc) or "Internal server error"})


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("query", "path", "body"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=400, content={"success": False, "message": "; ".join(messages)})


def create_app(store: Optional[CatalogStore] = None) -> FastAPI:
    app = FastAPI(title="Bookworm", version="0.1.0")
    app.state.store = store

    @app.on_event("startup")
    def on_startup() -> None:
        if app.state.store is None:
            app.state.store = CatalogStore.from_settings()
        app.state.store.create_tables()

    @app.get("/")
    def index() -> dict:
        return {"success": True, "message": "Server is Running ...."}

    app.add_exception_handler(BookwormError, handle_bookworm_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(recommend_router, prefix="/api")
    return app


app = create_app()
