import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from emr_scheduling.core.settings import settings, validate_settings
from emr_scheduling.db.session import SessionLocal, engine
from emr_scheduling.models import Base
from emr_scheduling.routers.appointments import router as appointments_router
from emr_scheduling.routers.patients import router as patients_router
from emr_scheduling.routers.pharmacies import router as pharmacies_router
from emr_scheduling.services.calendar_defaults import ensure_default_categories, ensure_default_statuses
from emr_scheduling.services.validation import field_errors

app = FastAPI(title="EMR Scheduling API", version="0.1.0")
logger = logging.getLogger("emr_scheduling.startup")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    # Body problems are reported per field; query and path problems keep the 422 shape.
    if errors and all(error.get("loc", ("",))[0] == "body" for error in errors):
        return JSONResponse(
            status_code=400,
            content={"detail": {"validation_errors": field_errors(errors)}},
        )
    logger.warning("Request validation failed for %s", request.url.path)
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = request.headers.get("x-request-id")
    logger.exception("Unhandled server error", extra={"request_id": request_id})
    payload = {"detail": "Internal server error"}
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=500, content=payload)


@app.on_event("startup")
def startup():
    validate_settings(settings)
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        categories = ensure_default_categories(db)
        if categories:
            logger.info("Default calendar categories ensured (%s added).", categories)
        statuses = ensure_default_statuses(db)
        if statuses:
            logger.info("Default appointment statuses ensured (%s added).", statuses)
    finally:
        db.close()
    if settings.select_multi_providers:
        logger.info("Multi-provider scheduling enabled.")


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(appointments_router)
app.include_router(patients_router)
app.include_router(pharmacies_router)
