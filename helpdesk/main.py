from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from helpdesk.api.routes import auth as auth_router
from helpdesk.api.routes import tickets as tickets_router
from helpdesk.api.routes import users as users_router
from helpdesk.config.db import check_db_connection, engine
from helpdesk.config.redis import check_redis_connection
from helpdesk.services.notifications import wait_for_pending_notifications
from helpdesk.utils.exceptions import StoreError, TicketingError
from helpdesk.utils.logging_config import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    """
    await check_db_connection()
    await check_redis_connection()
    logger.info("HELPDESK API IS READY")

    yield

    await wait_for_pending_notifications()
    await engine.dispose()


app = FastAPI(
    lifespan=lifespan,
    title="Ticket Management API",
    description="Role-gated management of users, support tickets and ticket assignments",
    version="1.0.0",
)


@app.exception_handler(TicketingError)
async def ticketing_error_handler(request: Request, exc: TicketingError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error(f"{request.method} {request.url.path} failed with a store error")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid request",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# Include routers
app.include_router(auth_router.router, tags=["Auth"])
app.include_router(users_router.router, prefix="/users", tags=["Users"])
app.include_router(tickets_router.router, prefix="/tickets", tags=["Tickets"])
app.include_router(tickets_router.assigned_router, tags=["Tickets"])


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": "Welcome to the Home page of this Ticket management system"}
