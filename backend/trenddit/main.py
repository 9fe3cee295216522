import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import GenerationSettings
from .routes.needs import router as needs_router
from .routes.solutions import router as solutions_router
from .routes.trends import router as trends_router
from .services.dependencies import get_generation_service
from .services.generation_service import GenerationService


# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    settings = GenerationSettings.from_env()
    app.state.generation_service = GenerationService.from_settings(settings)

    print("Starting Trenddit Business Intelligence API")
    print(f"   Provider:    {settings.provider.provider} ({settings.model.model})")
    print(f"   API Key:     {' Configured' if settings.provider.api_key else ' Not set (solutions use synthetic tier)'}")
    print(f"   Retries:     {settings.retry.max_attempts} attempt(s), deadline {settings.request_deadline:.0f}s")

    yield

    print("Shutting down Trenddit Business Intelligence API")
    await app.state.generation_service.aclose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Trenddit Business Intelligence API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",      # Next.js dev server
            "http://127.0.0.1:3000",      # Alternative localhost
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(trends_router)
    app.include_router(needs_router)
    app.include_router(solutions_router)

    @app.get(
        "/",
        summary="API Root",
        tags=["General"],
    )
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Trenddit Business Intelligence API",
            "version": "0.1.0",
            "docs": "/docs",
            "endpoints": {
                "analyze": "POST /trends/analyze - Analyze a trend's business impact",
                "needs": "POST /needs/generate - Generate business needs",
                "prioritize": "POST /needs/prioritize - Rank needs by impact and effort",
                "solutions": "POST /solutions/generate - Build / buy / partner solutions",
                "compare": "POST /solutions/compare - Compare solutions",
                "roi": "POST /solutions/roi - Project solution ROI",
            },
        }

    @app.get(
        "/health",
        summary="Global Health Check",
        tags=["General"],
    )
    async def health():
        return {
            "status": "healthy",
            "service": "trenddit-bi",
            "version": "0.1.0",
        }

    @app.get(
        "/generation/health",
        summary="Generation Pipeline Health",
        tags=["General"],
    )
    async def generation_health(service: GenerationService = Depends(get_generation_service)):
        """Settings summary (no secrets) plus per-process tier counters."""
        return {
            "status": "healthy",
            "settings": service.settings.summary(),
            "stats": service.stats(),
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler for unhandled errors."""
        logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "detail": str(exc) if os.getenv("DEBUG", "false").lower() == "true" else "An unexpected error occurred",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "trenddit.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "true").lower() == "true",
    )
