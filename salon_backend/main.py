from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salon_backend.config import get_settings
from salon_backend.errors import BookingError
from salon_backend.ledger import BookingLedger, SqlLedger, build_ledger
from salon_backend.logger import logger, setup_logging
from salon_backend.notifications import BookingNotifier
from salon_backend.schemas import BookingRequest
from salon_backend.services import SERVICES
from salon_backend.slots import SlotQueryService

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    logger.info(f"Starting {settings.PROJECT_NAME} backend ({settings.ENVIRONMENT})")
    app.state.ledger = build_ledger(settings)
    app.state.notifier = BookingNotifier(settings)
    yield
    if isinstance(app.state.ledger, SqlLedger):
        app.state.ledger.dispose()
    logger.info("Shutting down backend")


# ================== APP ==================
app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# ================== DEPENDENCIES ==================
def get_ledger(request: Request) -> BookingLedger:
    return request.app.state.ledger


def get_notifier(request: Request) -> BookingNotifier:
    return request.app.state.notifier


def get_slot_service(ledger: BookingLedger = Depends(get_ledger)) -> SlotQueryService:
    return SlotQueryService(ledger)


# ================== ERRORS ==================
@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "invalid request") if errors else "invalid request"
    return JSONResponse(status_code=400, content={"error": message, "code": "validation_error"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# ================== API ==================
@app.get("/")
def root():
    return {"ok": True, "message": f"{settings.PROJECT_NAME} backend running"}


@app.get("/api/health")
def health():
    return {"ok": True}


@app.get("/api/services")
def get_services():
    return SERVICES


@app.get("/api/slots")
def slots(
    date: str = Query(None, description="YYYY-MM-DD"),
    service: str = Query(None),
    slot_service: SlotQueryService = Depends(get_slot_service),
):
    result = slot_service.get_available_slots(date, service)
    return result.model_dump(by_alias=True, exclude_none=True)


@app.get("/api/appointments")
def list_appointments(ledger: BookingLedger = Depends(get_ledger)):
    return {"bookings": [b.model_dump(by_alias=True) for b in ledger.list_bookings()]}


@app.post("/api/appointments", status_code=201)
def create_appointment(
    payload: BookingRequest,
    background_tasks: BackgroundTasks,
    ledger: BookingLedger = Depends(get_ledger),
    notifier: BookingNotifier = Depends(get_notifier),
):
    booking = ledger.create_booking(payload)
    background_tasks.add_task(notifier.notify, booking)
    return {"ok": True, "booking": booking.model_dump(by_alias=True)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("salon_backend.main:app", host="0.0.0.0", port=settings.PORT)
