import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cotizaobra.server.api import descriptions, quotes
from cotizaobra.server.logging_setup import configure_logging
from cotizaobra.server.settings.config import settings
from cotizaobra.services.description_client import DescriptionClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("Startar %s (%s)", settings.app_name, settings.environment)
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY saknas – AI-beskrivningar är avstängda.")
    # en klient (och en http-pool) för hela appens livstid
    app.state.description_client = DescriptionClient()
    yield
    await app.state.description_client.aclose()
    logger.info("Avslutar appen...")


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

# CORS – så frontenden kan prata med backend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# UnsupportedFormatError, dubbla rad-id m.m. från offertgränssnittet
@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# Routers
app.include_router(quotes.router)          # /quotes/...
app.include_router(descriptions.router)    # /descriptions/generate


@app.get("/health", tags=["system"])
def health():
    return {
        "status": "ok",
        "environment": settings.environment,
        "generation_configured": bool(settings.openai_api_key),
    }
