import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .api import tasks
from .api import categories
from .api import users
from .api import views
from .api import notifications
from .api import websocket
from .api import health
from .config import settings
from .dependencies.store import get_storage, get_reminder_scanner
from .services.reminders import run_reminder_scanner

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Message returned with 400 responses, by resource
_INVALID_MESSAGES = {
    "/api/tasks": "Invalid task data",
    "/api/categories": "Invalid category data",
    "/api/notifications": "Invalid notification data",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    scanner_task = None
    if settings.reminders_enabled:
        scanner = get_reminder_scanner()
        scanner.center.add_listener(websocket.push_notification)
        scanner_task = asyncio.create_task(
            run_reminder_scanner(
                get_storage(),
                scanner,
                interval_seconds=settings.reminder_interval_seconds,
            )
        )
        logger.info("Reminder scanner started (every %ss)", settings.reminder_interval_seconds)
    app.state.reminder_task = scanner_task
    try:
        yield
    finally:
        if scanner_task is not None:
            scanner_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await scanner_task
            scanner.center.remove_listener(websocket.push_notification)
            logger.info("Reminder scanner stopped")


app = FastAPI(title="Taskboard", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(views.router, prefix="/api/views", tags=["views"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(websocket.router, tags=["websocket"])
app.include_router(health.router, tags=["health"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = "Invalid request data"
    for prefix, text in _INVALID_MESSAGES.items():
        if request.url.path.startswith(prefix):
            message = text
            break
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message, "errors": jsonable_encoder(exc.errors())},
    )


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/")
async def read_root():
    return {"message": "Welcome to Taskboard!"}
