"""
FastAPI application and API routes for WebCalc.
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from webcalc import __version__
from webcalc.config import configure_logging, settings
from webcalc.engine import press
from webcalc.models import CalculatorState, CalculatorView, PressRequest
from webcalc.session_store import SessionStore, get_session_store

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info("Starting WebCalc", version=__version__, session_backend=settings.session_backend)
    yield
    # Shutdown


app = FastAPI(
    title="WebCalc",
    description="Server-rendered calculator with per-user state",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend; credentialed, so origins and methods stay explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


def get_store() -> SessionStore:
    """Dependency returning the session store."""
    return get_session_store()


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/v1/config")
async def get_config():
    """Get public configuration."""
    return {
        "app_name": settings.app_name,
        "session_backend": settings.session_backend,
        "max_expression_length": settings.max_expression_length,
    }


# =============================================================================
# Calculator API
# =============================================================================

@app.get("/api/v1/calculator", response_model=CalculatorView)
async def get_calculator(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_store),
):
    """Get the caller's calculator state."""
    user_id = _get_user_identifier(request, response)
    state = await store.get(user_id)
    return CalculatorView.from_state(state)


@app.post("/api/v1/calculator/press", response_model=CalculatorView)
async def press_button(
    press_request: PressRequest,
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_store),
):
    """Apply a button press to the caller's calculator."""
    user_id = _get_user_identifier(request, response)
    button = press_request.button
    logger.info("Button pressed", button=button, user_id=user_id)

    async with store.lock(user_id):
        state = await store.get(user_id)
        _log_state("Before processing", state)

        outcome = press(state, button)

        _log_state("After processing", outcome.state)
        await store.put(user_id, outcome.state)

    return CalculatorView.from_state(outcome.state, error=outcome.error)


# =============================================================================
# Helper Functions
# =============================================================================

def _get_user_identifier(request: Request, response: Response) -> str:
    """Read the user identifier cookie, issuing a new one when missing."""
    user_id = request.cookies.get(settings.user_cookie_name)
    if user_id:
        return user_id

    user_id = str(uuid4())
    response.set_cookie(
        key=settings.user_cookie_name,
        value=user_id,
        max_age=settings.user_cookie_max_age_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
    )
    logger.info("Issued user identifier", user_id=user_id)
    return user_id


def _log_state(event: str, state: CalculatorState) -> None:
    logger.info(
        event,
        display=state.display,
        result=state.result,
        operation=state.operation.value,
        is_new_input=state.is_new_input,
    )
