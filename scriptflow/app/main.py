"""
ScriptFlow - research-driven script writing assistant
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.settings import get_settings
from ..config.startup_validation import ensure_validated
from ..resilience.errors import error_body
from ..utils.logger import configure_logging
from .routers import api

load_dotenv(override=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_validated()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json_file)

    app = FastAPI(title="ScriptFlow", version=__version__, lifespan=lifespan)

    app.include_router(api.router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        # Malformed bodies are client errors like any other failed check
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return JSONResponse(error_body("Invalid request body", details), status_code=400)

    @app.get("/health")
    async def health():
        validation = ensure_validated()
        return {
            "status": "healthy" if validation.is_valid else "degraded",
            "version": __version__,
            "validation": validation.to_dict(),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("scriptflow.app.main:app", host=settings.host, port=settings.port, reload=settings.debug)
