"""
bigeo/main.py
============================================
FastAPI Application for Shipment Tracking
============================================

Main entry point of the BiGeo backend: a REST API over the shipments table
used by the dashboard, the public tracking page and IoT trackers.

Architecture Overview:
---------------------
- REST API: /api/shipments (CRUD) and /api/iot-data (device reports)
- WebSocket: Real-time server logs streamed via /logs
- Storage: One SQLAlchemy engine (PostgreSQL or SQLite) created at import,
  one session per request

Error Bodies:
------------
Every failure is answered as {"error": "<message>"}:
    400 Missing required fields / Invalid request body
    404 Shipment not found / No shipment found for the given device ID
    409 Shipment with this device_id or shipment_id already exists
    500 Internal Server Error (details are logged, never returned)
"""

# Environment Configuration
from dotenv import load_dotenv
load_dotenv()

# FastAPI Core
from fastapi import FastAPI, Request, WebSocket
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import asyncio

from bigeo.Core.config import settings
from bigeo.Core import log_ws
from bigeo.Controller.Routes import shipments, iot
from bigeo.DB.database import create_all_tables, test_db_connection
from bigeo.DB.session import SessionLocal
from bigeo.Repositories.shipment import count_shipments
from bigeo.Services.errors import (
    ShipmentError,
    ShipmentConflictError,
    ShipmentValidationError,
    StorageUnavailableError,
)


ROOT_GREETING = "Welcome to the BiGeo Backend!"


# ============================================================
# ROOT PATH HANDLING
# ============================================================
class StripPrefixMiddleware(BaseHTTPMiddleware):
    """
    Removes ROOT_PATH from incoming request paths.

    Example:
        ROOT_PATH = "/bigeo"
        Incoming request: /bigeo/api/shipments
        FastAPI receives: /api/shipments
    """

    def __init__(self, app, prefix: str):
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request, call_next):
        if self.prefix:
            path = request.url.path

            if path == self.prefix:
                return RedirectResponse(url=self.prefix + "/", status_code=307)

            if path.startswith(self.prefix + "/"):
                request.scope["path"] = path[len(self.prefix):] or "/"

        return await call_next(request)


# ============================================================
# CORS CONFIGURATION
# ============================================================
def _parse_origins(csv_value: str):
    """
    Parse comma-separated origins.

    Returns:
        Tuple of (is_wildcard: bool, origins: list)

    Examples:
        "*" → (True, ["*"])
        "https://app.com, https://admin.app.com" → (False, ["https://app.com", "https://admin.app.com"])
        "" → (False, [])
    """
    if not csv_value:
        return (False, [])

    csv_value = csv_value.strip()

    if csv_value == "*":
        return (True, ["*"])

    origins = [origin.strip() for origin in csv_value.split(",") if origin.strip()]
    return (False, origins)


_http_allow_all, _http_origins = _parse_origins(settings.HTTP_ALLOWED_ORIGINS)
_ws_allow_all, _ws_origins = _parse_origins(settings.WS_ALLOWED_ORIGINS)


# ============================================================
# APPLICATION LIFESPAN MANAGEMENT
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
        1. Hand the running loop to the log WebSocket manager
        2. Create the shipments table if configured and the database answers
        3. Report the number of stored shipments

    An unreachable database never stops the application from starting;
    requests answer 500 until it comes back.

    Shutdown:
        Detach the log manager from the loop.
    """
    log_ws.log_ws_manager.set_main_loop(asyncio.get_running_loop())

    if test_db_connection():
        try:
            if settings.CREATE_TABLES_ON_STARTUP:
                create_all_tables()
            with SessionLocal() as db:
                print(f"[STARTUP] Database contains {count_shipments(db)} shipments")
        except SQLAlchemyError as e:
            log_ws.log_from_thread(f"[STARTUP] Database setup failed: {type(e).__name__}: {e}", "error")
    else:
        log_ws.log_from_thread("[STARTUP] Database is not reachable; requests will fail until it is", "error")

    print("[STARTUP] Application initialization complete")

    yield

    print("[SHUTDOWN] Application shutdown initiated")
    log_ws.log_ws_manager.set_main_loop(None)


# ============================================================
# APPLICATION INSTANCE CREATION
# ============================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan
)


# ============================================================
# MIDDLEWARE REGISTRATION
# ============================================================
# Middlewares run in REVERSE order of registration.
ROOT_PATH = settings.normalized_root_path
if ROOT_PATH:
    app.add_middleware(StripPrefixMiddleware, prefix=ROOT_PATH)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_http_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR HANDLERS
# ============================================================
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(ShipmentError)
async def shipment_error_handler(request: Request, exc: ShipmentError):
    if isinstance(exc, StorageUnavailableError):
        log_ws.log_from_thread(
            f"[STORE] {request.method} {request.url.path} failed: {exc.describe()}", "error"
        )
    elif isinstance(exc, ShipmentValidationError):
        log_ws.log_from_thread(
            f"[API] {request.method} {request.url.path} rejected: "
            f"{', '.join(exc.missing_fields) or '-'}",
            "warning",
        )
    elif isinstance(exc, ShipmentConflictError):
        log_ws.log_from_thread(
            f"[API] {request.method} {request.url.path} conflict: {exc.context}", "warning"
        )

    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    for err in exc.errors():
        if err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",):
            return _error(400, ShipmentValidationError.public_message)

    return _error(400, "Invalid request body")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    log_ws.log_from_thread(
        f"[API] {request.method} {request.url.path} crashed: {type(exc).__name__}: {exc}", "error"
    )
    return _error(500, "Internal Server Error")


# ============================================================
# ROOT AND HEALTH ENDPOINTS
# ============================================================
@app.get("/", response_class=PlainTextResponse)
def root():
    return ROOT_GREETING


@app.get("/health")
def health():
    """
    Health check endpoint for load balancers and container orchestration.

    Returns:
        {"status": "ok" | "degraded", "database": "connected" | "disconnected"}
    """
    db_healthy = test_db_connection()
    return {
        "status": "ok" if db_healthy else "degraded",
        "database": "connected" if db_healthy else "disconnected"
    }


# ============================================================
# REST API ROUTE REGISTRATION
# ============================================================
app.include_router(shipments.router, prefix="/api/shipments", tags=["shipments"])
app.include_router(iot.router, prefix="/api", tags=["iot"])


# ============================================================
# WEBSOCKET ENDPOINTS
# ============================================================
async def socket_handler(ws: WebSocket, manager):
    """
    Generic WebSocket lifecycle with origin validation.

    Connections from origins outside WS_ALLOWED_ORIGINS are closed with
    code 1008 (policy violation).
    """
    origin = ws.headers.get("origin")

    if (not _ws_allow_all) and (origin not in _ws_origins):
        print(f"[WS] Connection rejected - unauthorized origin: {origin}")
        await ws.close(code=1008)
        return

    await manager.register(ws)

    try:
        while True:
            message = await ws.receive_text()
            await manager.handle_message(ws, message)
    except Exception as e:
        print(f"[WS] Connection closed: {type(e).__name__}")
    finally:
        manager.unregister(ws)


@app.websocket("/logs")
async def websocket_logs(ws: WebSocket):
    """
    Stream server log events.

    Message Format:
        {"msg_type": "log" | "error" | "warning", "message": "...", "timestamp": "..."}
    """
    await socket_handler(ws, log_ws.log_ws_manager)
