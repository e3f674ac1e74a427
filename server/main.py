"""FastAPI server entrypoint for Tunesmith.

REST API for generating compositions, reading them back, downloading them as
MIDI files, and inspecting server health and metrics.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from composition.exceptions import InvalidParameterError
from composition.music_theory import list_options
from server.config import get_config
from server.di_container import DIContainer
from server.exceptions import ExportError
from server.logging_config import setup_logging
from server.schemas import GenerateRequest

# Initialize logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager (startup/shutdown).

    Args:
        app: FastAPI application instance

    Yields:
        Control during application lifetime
    """
    logger.info("=" * 60)
    logger.info("Starting Tunesmith server...")

    container = DIContainer()
    config = container.get_config()
    app.state.container = container
    app.state.started_at = time.time()

    logger.info(f"Environment: {config.env}")
    logger.info(f"Host: {config.host}:{config.port}")
    logger.info("Tunesmith server ready!")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Tunesmith server...")
    container.cleanup()
    logger.info("Tunesmith server stopped")


def get_container(request: Request) -> DIContainer:
    """Resolve the DI container owned by the running application."""
    return request.app.state.container


# Create FastAPI app
app = FastAPI(
    title="Tunesmith API",
    version="1.0.0",
    description="Procedural multi-track music composition engine",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Web client assets, served at the site root once the API routes are registered
public_dir = Path("public")


# Error handlers


@app.exception_handler(RequestValidationError)
async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map malformed request bodies to 400."""
    errors = exc.errors()
    if any(error.get("type") == "missing" for error in errors):
        message = "Missing required parameters"
    else:
        message = "Invalid parameters"
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg"),
        }
        for error in errors
    ]
    return JSONResponse(status_code=400, content={"error": message, "details": details})


@app.exception_handler(InvalidParameterError)
async def handle_invalid_parameter(
    request: Request, exc: InvalidParameterError
) -> JSONResponse:
    """Map unknown genre/key/mood/complexity to 400."""
    return JSONResponse(
        status_code=400, content={"error": str(exc), "field": exc.field}
    )


@app.exception_handler(ExportError)
async def handle_export_error(request: Request, exc: ExportError) -> JSONResponse:
    """Map MIDI serialization failures to 500."""
    logger.error(f"Error generating MIDI: {exc}")
    return JSONResponse(
        status_code=500, content={"error": "Failed to generate MIDI file"}
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Log anything unhandled and answer 500."""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Composition not found"})


# REST API Endpoints


@app.get("/")
async def serve_root() -> HTMLResponse:
    """Serve main HTML client interface.

    Returns:
        HTML response with client application
    """
    index_path = public_dir / "index.html"

    if not index_path.exists():
        return HTMLResponse(
            content="<h1>Tunesmith Server</h1><p>Client not found. Please ensure public/index.html exists.</p>",
            status_code=404,
        )

    with open(index_path) as f:
        return HTMLResponse(content=f.read())


@app.post("/api/generate")
async def generate_composition(
    body: GenerateRequest, container: DIContainer = Depends(get_container)
) -> dict[str, Any]:
    """Generate and store a new composition.

    Returns:
        ``{success, composition: {id, ...}, message}``
    """
    config = container.get_config()
    parameters = body.to_parameters()

    logger.info(
        f"Generating composition with params: {parameters.to_dict()}",
        extra={"genre": parameters.genre},
    )

    if config.generation_delay_sec > 0:
        await asyncio.sleep(config.generation_delay_sec)

    # Composition is CPU-bound; keep it off the event loop
    generated = await run_in_threadpool(
        container.get_composition_service().generate, parameters
    )

    return {
        "success": True,
        "composition": generated.to_dict(),
        "message": "Composition generated successfully",
    }


@app.get("/api/composition/{composition_id}", response_model=None)
async def get_composition(
    composition_id: str, container: DIContainer = Depends(get_container)
) -> dict[str, Any] | JSONResponse:
    """Get a stored composition by id."""
    composition = container.get_composition_service().lookup(composition_id)
    if composition is None:
        return _not_found()

    return {"success": True, "composition": {"id": composition_id, **composition.to_dict()}}


@app.get("/api/compositions")
async def get_compositions(
    container: DIContainer = Depends(get_container),
) -> dict[str, Any]:
    """List all stored compositions."""
    compositions = container.get_composition_service().list_compositions()
    return {"success": True, "compositions": [item.to_dict() for item in compositions]}


@app.post("/api/download-midi/{composition_id}", response_model=None)
async def download_midi(
    composition_id: str, container: DIContainer = Depends(get_container)
) -> Response:
    """Download a stored composition as a Standard MIDI File."""
    composition = container.get_composition_service().lookup(composition_id)
    if composition is None:
        return _not_found()

    exporter = container.get_midi_exporter()
    data = await run_in_threadpool(exporter.to_bytes, composition)
    container.get_metrics().increment_midi_export()

    return Response(
        content=data,
        media_type="audio/midi",
        headers={
            "Content-Disposition": f'attachment; filename="{exporter.filename(composition)}"'
        },
    )


@app.get("/api/options")
async def get_options() -> dict[str, list]:
    """Get the accepted genres, keys, moods and complexity levels."""
    return list_options()


@app.get("/api/metrics")
async def get_metrics(
    container: DIContainer = Depends(get_container),
) -> dict[str, Any]:
    """Get generation metrics.

    Returns:
        Dictionary with latency percentiles, counters and memory usage
    """
    return container.get_metrics().get_snapshot()


# Health check endpoint


@app.get("/api/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Health check endpoint.

    Returns:
        Health status
    """
    return {
        "success": True,
        "message": "Tunesmith server is running",
        "uptime_sec": time.time() - request.app.state.started_at,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def mount_client(target: FastAPI, directory: Path) -> None:
    """Serve the web client's files from the site root.

    Must run after every route is registered; routes added earlier take
    precedence over the catch-all mount.

    Args:
        target: Application to mount on
        directory: Directory holding index.html and its assets
    """
    if directory.exists():
        target.mount("/", StaticFiles(directory=str(directory)), name="client")
        logger.info(f"Serving web client from {directory}")


mount_client(app, public_dir)
