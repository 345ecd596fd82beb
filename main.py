"""Main FastAPI application"""
import os
import logging
import logging.config
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from routes import router as api_router
from services.expense_store import ExpenseStore
from services.views import ChartView, TableView
from utils.seed_data import demo_expenses

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

load_dotenv()  # searches current dir and parents

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() == "true"
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")
DEFAULT_RATE_LIMIT = os.getenv("RATE_LIMIT", "120/minute")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
PUBLIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "public")

# --- Unified Logging Configuration with Rich ---
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            # RichHandler renders time and level itself
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "level": "DEBUG",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
            "markup": False,
        },
    },
    "loggers": {
        "uvicorn": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "": {  # Root logger for our application
            "handlers": ["default"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

logging.config.dictConfig(LOGGING_CONFIG)

logger = logging.getLogger(__name__)

# --- Rate Limiter Setup ---
# In-memory storage; the default limit applies to every route through SlowAPIMiddleware
limiter = Limiter(key_func=get_remote_address, default_limits=[DEFAULT_RATE_LIMIT], enabled=RATE_LIMIT_ENABLED)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the store and the views that follow it
    store = ExpenseStore(demo_expenses() if SEED_DEMO_DATA else ())
    app.state.expense_store = store
    app.state.table_view = TableView(store, currency_symbol=CURRENCY_SYMBOL)
    app.state.chart_view = ChartView(store, currency_symbol=CURRENCY_SYMBOL)
    logger.info(f"Expense store ready with {len(store)} records (SEED_DEMO_DATA = {SEED_DEMO_DATA}).")

    yield  # Application runs here

    # Shutdown: detach views; the data is discarded with the process
    app.state.table_view.close()
    app.state.chart_view.close()
    logger.info("Expense views closed.")


app = FastAPI(
    title="Expense Tracker API",
    description="API for recording expenses and charting totals by category, day, month and year.",
    version="0.1.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports form errors as one inline message per field."""
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        errors.setdefault(field, error["msg"].removeprefix("Value error, "))
    logger.warning(f"Validation failed for {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=422, content={"detail": "Validation failed", "errors": errors})


# --- Middleware (order matters) ---
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    api_router,
    prefix="/api",
    tags=["api"],
)

# Mount static files directory (MUST be after API router)
app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="static")


@app.middleware("http")
async def add_app_state_to_request(request: Request, call_next):
    """Adds the expense store and its views to the request state."""
    request.state.expense_store = getattr(request.app.state, "expense_store", None)
    request.state.table_view = getattr(request.app.state, "table_view", None)
    request.state.chart_view = getattr(request.app.state, "chart_view", None)
    response = await call_next(request)
    return response


if __name__ == "__main__":
    import uvicorn
    # Application logs use the RichHandler configured above
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
