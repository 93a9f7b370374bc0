# main.py
import time
import uuid
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from app_context import build_context
from config import LOAD_DEMO_DATA, SERVICE_NAME
from errors import AuthenticationError, DataProcessingError
from logging_config import get_logger
from routers import analytics, auth, users, campaigns, contracts, payments
from workflows import load_demo_data

logger = get_logger("influencer_manager", component="api")

app = FastAPI(title="Influencer Manager")

@app.on_event("startup")
def on_startup():
    ctx = build_context()
    if LOAD_DEMO_DATA:
        load_demo_data(ctx)
    ctx.notifications.start()
    app.state.ctx = ctx
    logger.info("API started", extra={"service": SERVICE_NAME, "demo_data": LOAD_DEMO_DATA})

@app.on_event("shutdown")
def on_shutdown():
    ctx = getattr(app.state, "ctx", None)
    if ctx is not None:
        ctx.notifications.stop(timeout=5)
        drained = ctx.notifications.process_pending()
        logger.info("API stopped", extra={"drained_notifications": drained})

@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    start = time.time()

    try:
        response: Response = await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled exception",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
            },
        )
        raise

    duration_ms = int((time.time() - start) * 1000)

    logger.info(
        "request",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )

    response.headers["x-request-id"] = request_id
    return response

@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})

@app.exception_handler(DataProcessingError)
async def data_processing_error_handler(request: Request, exc: DataProcessingError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
app.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
app.include_router(payments.router, prefix="/payments", tags=["payments"])
app.include_router(analytics.router, prefix="/analytics", tags=["analytics"])

@app.get("/health")
def health():
    return {"ok": True}
