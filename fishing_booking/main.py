from contextlib import asynccontextmanager
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("fishing_booking")

from fishing_booking import models  # noqa: E402,F401  registers every table
from fishing_booking.database import Base, engine  # noqa: E402
from fishing_booking.exceptions import BookingError  # noqa: E402
from fishing_booking.routers import auth, boats, reservations, trips  # noqa: E402
from fishing_booking.services.notifications import notification_dispatcher  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    if os.getenv("AUTO_CREATE_TABLES", "false").lower() in {"1", "true", "yes"}:
        # Production schemas come from Alembic; this is for local runs
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Waiting for pending notifications...")
    notification_dispatcher.shutdown(wait=True)


app = FastAPI(
    title="Fishing Booking API",
    description="API for captains to publish fishing trips and for guests to reserve seats",
    version="1.0.0",
    lifespan=lifespan,
)


def _cors_origins():
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=_cors_origins() != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["authentication"])
app.include_router(boats.router, prefix="/boats", tags=["boats"])
app.include_router(trips.router, prefix="/trips", tags=["trips"])
app.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)


@app.get("/")
def read_root():
    return {"message": "Welcome to the Fishing Booking API"}


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(
            "Booking error | path=%s | method=%s | %s",
            request.url.path,
            request.method,
            exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, **exc.details},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed or out-of-range input is an invalid request, reported as 400
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request.", "errors": jsonable_encoder(exc.errors())},
    )


# Global unhandled exception handler -> logs ERROR
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error | path=%s | method=%s | client=%s",
        request.url.path,
        request.method,
        request.client.host if request.client else "unknown",
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


if __name__ == "__main__":
    uvicorn.run("fishing_booking.main:app", host="0.0.0.0", port=8000, reload=True)
