import os
import sys
import logging
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from routes.course_routes import router as course_router
from services.content_generator import ContentGenerator
from utils.cache import TTLCache, DEFAULT_TTL_SECONDS
from utils.credentials import SettingsStore, default_sources, resolve_api_key
from utils.error_handler import normalize_error, log_error
from utils.exceptions import LearnwareError
from utils.storage import SupabaseRecordStore, SupabaseSettingsStore

# Configure logging
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

load_dotenv()


def create_app(
    settings_store: Optional[SettingsStore] = None,
    generator: Optional[ContentGenerator] = None,
    store_factory: Optional[Callable[..., Any]] = None,
) -> FastAPI:
    """
    Build the API with its collaborators.
    The Gemini key is resolved once here (settings store, then environment).
    """
    settings_store = settings_store or SupabaseSettingsStore()

    if generator is None:
        cache_ttl = float(os.getenv("CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS))
        credential = resolve_api_key(default_sources(settings_store))
        generator = ContentGenerator.from_credential(credential, TTLCache(default_ttl=cache_ttl))

    app = FastAPI(title="Learnware Grove API")
    app.state.settings_store = settings_store
    app.state.generator = generator
    app.state.store_factory = store_factory or SupabaseRecordStore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LearnwareError)
    async def learnware_exception_handler(request: Request, exc: LearnwareError):
        log_error(normalize_error(exc))
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder({
                "error": exc.error_code,
                "message": exc.message,
                "context": exc.context,
            }),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "error": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "generator_configured": app.state.generator.is_configured}

    app.include_router(course_router)
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
