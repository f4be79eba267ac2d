"""
Application entry point.

Run locally:
    uvicorn app.main:app --reload --port 8000

In Docker:
    CMD ["uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", "8000"]

API docs available at:
    http://localhost:8000/docs   (Swagger UI)
    http://localhost:8000/redoc  (ReDoc)
"""
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.core.exceptions import validation_exception_handler
from app.core.logger import setup_logging
from app.core.rate_limiter import limiter
from app.middleware.access_filters import block_blacklisted_ip, block_blocked_email, resolve_tenant
from app.routers import auth, admin, kyc, services, bookings, payments, cities


def create_app() -> FastAPI:
    logger = setup_logging()

    app = FastAPI(
        title="Servease Marketplace API",
        description=(
            "Backend for a multi-tenant service marketplace. "
            "Supports OTP-verified signup and signin, rotating refresh tokens, "
            "KYC review, service listings, bookings and payment tracking."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        # Run on every route, in this order, before the route's own dependencies
        dependencies=[
            Depends(block_blacklisted_ip),
            Depends(block_blocked_email),
            Depends(resolve_tenant),
        ],
    )

    # ── Rate Limiter ──────────────────────────────────────────────────────────
    # Attach limiter to app state (required by slowapi)
    # Register the 429 handler so exceeded limits return proper JSON
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Malformed input is a 400 across the API
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # ── CORS ──────────────────────────────────────────────────────────────────
    # In production, CORS_ORIGINS in .env should only list your frontend domain
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────────
    prefix = settings.api_prefix

    # Auth (public except logout/profile, which take a bearer token)
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Auth"])

    # Admin console (active account + route permission table)
    app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["Admin"])

    # Provider onboarding
    app.include_router(kyc.router, prefix=f"{prefix}/kyc", tags=["KYC"])

    # Marketplace
    app.include_router(services.router, prefix=f"{prefix}/services", tags=["Services"])
    app.include_router(bookings.router, prefix=f"{prefix}/bookings", tags=["Bookings"])
    app.include_router(payments.router, prefix=f"{prefix}/payments", tags=["Payments"])

    # Reference data
    app.include_router(cities.router, prefix=f"{prefix}/cities", tags=["Cities"])

    # ── Health Check ──────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health_check():
        """
        Simple health check endpoint for load balancers and Docker health checks.
        Returns 200 if the application is running.
        """
        return {"status": "ok", "version": "1.0.0"}

    logger.info("%s API ready under %s", settings.app_name, prefix)
    return app


app = create_app()
