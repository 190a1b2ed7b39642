"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cashflow_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cashflow_planner.api.v1 import cashflow, patterns, payoff
from cashflow_planner.infrastructure.observability.logging import setup_logging
from cashflow_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cashflow Planner",
        description="Recurring pattern detection and debt payoff projection service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(patterns.router, prefix="/v1", tags=["patterns"])
    app.include_router(payoff.router, prefix="/v1", tags=["payoff"])
    app.include_router(cashflow.router, prefix="/v1", tags=["cashflow"])

    return app


app = create_app()
