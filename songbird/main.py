import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from songbird.core.config import settings
from songbird.api.routes import (
    absences,
    auth,
    dashboard,
    hours,
    shift_requests,
    shifts,
    time_off_requests,
    trade_requests,
    users,
)
from songbird.services.exchange import ExchangeError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Songbird Scheduler API", version="0.1.0")

app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(shifts.router, prefix="/api/v1")
app.include_router(hours.router, prefix="/api/v1")
app.include_router(shift_requests.router, prefix="/api/v1")
app.include_router(trade_requests.router, prefix="/api/v1")
app.include_router(time_off_requests.router, prefix="/api/v1")
app.include_router(absences.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")


@app.exception_handler(ExchangeError)
def exchange_error_handler(request: Request, exc: ExchangeError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
def health_check():
    return {"status": "ok"}
