"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from edunexia_charges.api.middleware import RequestIDMiddleware, MetricsMiddleware
from edunexia_charges.api.v1 import charges, customers, wizards
from edunexia_charges.infrastructure.observability.logging import setup_logging
from edunexia_charges.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="EdunexIA Charges",
        description="Charge composition, installment simulation and payment-link wizard service",
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
    app.include_router(charges.router, prefix="/v1", tags=["charges"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(wizards.router, prefix="/v1", tags=["payment-link-wizards"])

    return app


app = create_app()
