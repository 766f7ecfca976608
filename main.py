"""Main entrypoint and application factory for the KarirKita marketplace API.

This module builds the FastAPI application, configures logging, attaches the single marketplace session to the app
state, maps domain errors onto HTTP errors, and exposes the Scalar API reference endpoint for interactive OpenAPI
documentation. It also includes the main entrypoint for running the app with Uvicorn.
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from scalar_fastapi import get_scalar_api_reference

from karirkita.api.routes import router
from karirkita.core.errors import (
    AgentError,
    InvalidTransitionError,
    JobNotFoundError,
    MarketplaceError,
    ValidationError,
)
from karirkita.core.settings import Settings, get_settings
from karirkita.core.utils import get_logger
from karirkita.services.marketplace import MarketplaceSession

_ERROR_STATUS: list[tuple[type[MarketplaceError], int]] = [
    (ValidationError, 400),
    (JobNotFoundError, 404),
    (InvalidTransitionError, 409),
    (AgentError, 502),
]


# --- Logging Setup ---
def setup_logging(settings: Settings) -> None:
    """Configure logging to file and console, and ensure the log directory exists."""
    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger = get_logger("karirkita")
    logger.setLevel(logging.INFO)
    # Add file handler for persistent logs (not colorized)
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(file_handler)
    logger.propagate = False


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """Translate a domain error into a JSON error response."""
    _ = request  # Silence unused argument warning
    status_code = next((code for cls, code in _ERROR_STATUS if isinstance(exc, cls)), 400)
    get_logger("karirkita.api").warning(f"{type(exc).__name__}: {exc} -> HTTP {status_code}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": type(exc).__name__})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API application around a fresh marketplace session."""
    settings = settings or get_settings()
    setup_logging(settings)
    app = FastAPI(
        docs_url="/docs",
        redoc_url="/redoc",
        title="KarirKita Marketplace API",
        description="""
    The KarirKita API runs one virtual career marketplace session: a worker or employer with a virtual IDR wallet,
    AI-generated and employer-posted jobs, and the job lifecycle from OPEN to COMPLETED.

    **Endpoints:**
    - `POST /me/role`, `PATCH /me/profile`: choose a role and fill in the profile.
    - `POST /wallet/deposit`: top up the wallet (minimum Rp 100.000).
    - `POST /jobs/refresh`, `GET /jobs`: generate and browse jobs.
    - `POST /jobs/{job_id}/apply`, `POST /jobs/{job_id}/submit`: take a job and hand in work.
    - `POST /jobs`, `POST /jobs/{job_id}/approve`: post a job and release payment.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
        version="1.0.0",
    )
    app.state.session = MarketplaceSession(settings)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.include_router(router)

    @app.get("/scalar", include_in_schema=False)
    async def scalar_docs() -> HTMLResponse:
        """Return Scalar API reference."""
        return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
