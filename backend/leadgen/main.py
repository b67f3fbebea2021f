"""Main FastAPI application."""

import logging

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leadgen import __version__
from leadgen.config import settings
from leadgen.database import Base, create_engine, create_session_factory, init_db
from leadgen.exceptions import LeadGenError
from leadgen.models import utcnow
from leadgen.routers import ai_routes, campaign_routes, prospect_routes, source_routes
from leadgen.services.llm_client import create_llm_client

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

IMPORT_STAT_HEADERS = [
    "X-Import-Received",
    "X-Import-Valid",
    "X-Import-Inserted",
    "X-Import-Skipped-Invalid",
    "X-Import-Skipped-Duplicate-Email",
    "X-Import-Skipped-Duplicate-Fallback",
    "X-Import-Skipped-Suppressed",
    "X-Import-Skipped-Other",
]


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(LeadGenError)
    async def leadgen_error_handler(request: Request, exc: LeadGenError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": details},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Lead Gen API",
        description="Prospect lists, campaigns and AI-assisted outreach helpers",
        version=__version__,
        redirect_slashes=False,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=IMPORT_STAT_HEADERS,
    )

    register_exception_handlers(app)

    app.include_router(source_routes.router)
    app.include_router(prospect_routes.router)
    app.include_router(campaign_routes.router)
    app.include_router(ai_routes.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "app": "leadgen-backend",
            "timestamp": utcnow().isoformat(),
        }

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting Lead Gen API...")
        engine = create_engine(settings.DATABASE_URL)
        await init_db(engine)

        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        app.state.http_client = httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            headers={"User-Agent": f"leadgen-backend/{__version__}"},
        )
        app.state.llm_client = create_llm_client(settings)

        logger.info("=" * 50)
        logger.info(f"Registered {len(Base.metadata.tables)} tables: {', '.join(sorted(Base.metadata.tables))}")
        logger.info(f"Lead Desk: {settings.LEADDESK_API_BASE}")
        logger.info(f"AI helpers: {'enabled' if app.state.llm_client else 'fallback only'}")
        logger.info("=" * 50)
        logger.info("Application started successfully!")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Lead Gen API...")
        await app.state.http_client.aclose()
        if app.state.llm_client is not None:
            await app.state.llm_client.close()
        await app.state.engine.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("leadgen.main:app", host="0.0.0.0", port=settings.PORT, reload=False)
