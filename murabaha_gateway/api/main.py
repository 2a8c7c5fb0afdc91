"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from murabaha_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from murabaha_gateway.api.routes import audit, calculate, clients, contracts, dashboard
from murabaha_gateway.infrastructure.database.session import init_db
from murabaha_gateway.infrastructure.observability.logging import setup_logging
from murabaha_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Mizan Murabaha Gateway",
        description="Murabaha calculator, client registry and contract workflow",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(calculate.router, prefix="/api", tags=["calculator"])
    app.include_router(clients.router, prefix="/api", tags=["clients"])
    app.include_router(contracts.router, prefix="/api", tags=["contracts"])
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
    app.include_router(audit.router, prefix="/api", tags=["audit"])

    return app


app = create_app()
