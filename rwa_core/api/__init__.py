"""
RWA Core API Application Factory
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import get_config
from ..logging_config import setup_logging
from ..errors import (
    RwaError, ValidationError, Unauthorized, NotFound, AlreadyExists, AssetInactive
)
from .assets import router as assets_router
from .transfers import router as transfers_router
from .holdings import router as holdings_router
from .metadata import router as metadata_router


# Everything not listed is a 400
ERROR_STATUS_CODES = {
    Unauthorized: 403,
    NotFound: 404,
    AlreadyExists: 409,
    AssetInactive: 409,
}


def status_code_for(error: RwaError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_class):
            return status_code
    return 400


async def rwa_error_handler(request: Request, exc: RwaError) -> JSONResponse:
    content = {"detail": str(exc), "error": exc.code}
    if isinstance(exc, ValidationError):
        content["field"] = exc.field
    return JSONResponse(status_code=status_code_for(exc), content=content)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="RWA Core API",
        description="Fractional ownership of tokenized real-world assets",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RwaError, rwa_error_handler)

    app.include_router(assets_router, prefix="/assets", tags=["Assets"])
    app.include_router(transfers_router, prefix="/transfers", tags=["Transfers"])
    app.include_router(holdings_router, prefix="/holdings", tags=["Holdings"])
    app.include_router(metadata_router, prefix="/metadata", tags=["Metadata"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "rwa_core_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "RWA Core API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "assets": "/assets",
                "transfers": "/transfers",
                "holdings": "/holdings",
                "metadata": "/metadata",
            }
        }

    return app


app = create_app()


def run_server(host: str = None, port: int = None, debug: bool = False):
    """Run the FastAPI server"""
    settings = get_config()
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    uvicorn.run(
        "rwa_core.api:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=debug,
        workers=None if debug else settings.api_workers,
        log_level=settings.log_level.lower()
    )
