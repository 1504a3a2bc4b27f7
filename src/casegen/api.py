import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from casegen.config import Settings, load_settings
from casegen.error import ConfigError
from casegen.logging import configure_logging, get_logger, log_event
from casegen.model import GenerateRequest, GenerateResponse, GenerationResult
from casegen.provider import Gemini
from casegen.service import CaseProvider, GenerationService

STATIC_DIR = Path(__file__).parent / "static"
INDEX_FILE = STATIC_DIR / "index.html"

INVALID_BODY_ERROR = (
    "Invalid request body. Expected JSON with a 'code' string and an optional "
    "'language' string."
)

logger = get_logger("casegen.api")


def create_app(settings: Settings, provider: Optional[CaseProvider] = None) -> FastAPI:
    """Builds the relay app. ``provider`` defaults to a Gemini client for ``settings``."""
    if provider is None:
        provider = Gemini(model=settings.model, api_key=settings.google_api_key)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_event(logger, "server_started", {"host": settings.host, "port": settings.port, "model": settings.model})
        yield
        logger.info("server_stopped")

    app = FastAPI(title="casegen", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = GenerationService(provider)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning("invalid_body", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(
            status_code=400,
            content=GenerationResult.fail(INVALID_BODY_ERROR, status_code=400).payload(),
        )

    @app.post("/generate-tests", response_model=GenerateResponse, response_model_exclude_none=True)
    async def generate_tests(request: Request, body: Optional[GenerateRequest] = None):
        logger.info("request_received", path="/generate-tests")
        if body is None:
            body = GenerateRequest()
        result = await request.app.state.service.generate_tests(body)
        return JSONResponse(status_code=result.status_code, content=result.payload())

    @app.get("/health")
    async def health_check():
        """Basic health check endpoint."""
        return {"status": "ok", "model": settings.model}

    @app.get("/{full_path:path}")
    async def static_or_index(full_path: str):
        candidate = (STATIC_DIR / full_path).resolve()
        if full_path and candidate.is_file() and STATIC_DIR.resolve() in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(INDEX_FILE)

    return app


def main():
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging("casegen")
        logger.error("fatal_config_error", error=str(e))
        sys.exit(1)

    configure_logging("casegen", settings.log_level)
    app = create_app(settings)
    log_event(logger, "server_starting", {"url": f"http://localhost:{settings.port}"})
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
