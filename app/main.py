import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import ShareItError
from app.core.logging import configure_logging
from app.db.init_db import init_db
from app.api.routes import users as users_router
from app.api.routes import items as items_router
from app.api.routes import bookings as bookings_router
from app.api.routes import item_requests as item_requests_router

configure_logging()
logger = logging.getLogger(__name__)


app = FastAPI(title="ShareIt")

@app.on_event("startup")
def startup():
    init_db()

@app.get("/")
def root():
    return {"message": "ShareIt API running"}


@app.exception_handler(ShareItError)
def handle_shareit_error(request: Request, exc: ShareItError):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in errors
    )
    logger.warning("Rejected request %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message or "Invalid request"})


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(users_router.router)
app.include_router(items_router.router)
app.include_router(bookings_router.router)
app.include_router(item_requests_router.router)
