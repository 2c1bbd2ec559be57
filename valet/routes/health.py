"""
Health check endpoints with dependency monitoring

Provides two endpoints:
- GET /api/health - Basic health check
- GET /api/health/dependencies - Detailed dependency status check
"""
import time
from datetime import datetime
from typing import Dict, Optional
from fastapi import APIRouter, status
from pydantic import BaseModel, Field
import asyncio

import stripe

from valet import __version__
from valet.config import get_settings
from valet.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Application start time for uptime calculation
APP_START_TIME = time.time()

# Cache for dependency check results (30 seconds TTL)
_dependency_cache: Optional["DependencyHealth"] = None
_cache_timestamp: float = 0.0
CACHE_TTL_SECONDS = 30.0


# ============================================================================
# Pydantic Models
# ============================================================================

class HealthResponse(BaseModel):
    """Basic health check response"""
    status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Application uptime in seconds")


class DependencyStatus(BaseModel):
    """Status of a single dependency"""
    name: str = Field(..., description="Dependency name")
    status: str = Field(..., description="Status: healthy, degraded, unhealthy")
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    error_message: Optional[str] = Field(None, description="Error message if unhealthy")


class DependencyHealth(BaseModel):
    """Dependency health check response"""
    overall_status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    dependencies: Dict[str, DependencyStatus] = Field(..., description="Individual dependency statuses")
    checked_at: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")


# ============================================================================
# Dependency Check Functions
# ============================================================================

async def check_supabase() -> DependencyStatus:
    """
    Check Supabase database connectivity

    Returns:
        DependencyStatus with health information
    """
    if not settings.supabase_url:
        return DependencyStatus(
            name="supabase",
            status="unhealthy",
            error_message="Supabase URL not configured"
        )

    try:
        from valet.services.supabase_client import get_supabase_client

        start = time.time()
        client = get_supabase_client()

        # Try a simple query with timeout
        await asyncio.wait_for(
            asyncio.to_thread(
                lambda: client.table("tickets").select("id").limit(1).execute()
            ),
            timeout=5.0
        )

        latency = (time.time() - start) * 1000

        return DependencyStatus(
            name="supabase",
            status="healthy",
            latency_ms=round(latency, 2)
        )

    except asyncio.TimeoutError:
        logger.error("Supabase health check timed out")
        return DependencyStatus(
            name="supabase",
            status="unhealthy",
            error_message="Request timed out after 5 seconds"
        )
    except Exception as e:
        logger.error(f"Supabase health check failed: {e}")
        return DependencyStatus(
            name="supabase",
            status="unhealthy",
            error_message=str(e)
        )


async def check_stripe_api() -> DependencyStatus:
    """
    Check Stripe API connectivity with the configured secret key

    Returns:
        DependencyStatus with health information
    """
    if not settings.stripe_secret_key:
        return DependencyStatus(
            name="stripe_api",
            status="degraded",
            error_message="API key not configured"
        )

    try:
        start = time.time()

        await asyncio.wait_for(
            asyncio.to_thread(stripe.Balance.retrieve, api_key=settings.stripe_secret_key),
            timeout=5.0
        )

        latency = (time.time() - start) * 1000

        return DependencyStatus(
            name="stripe_api",
            status="healthy",
            latency_ms=round(latency, 2)
        )

    except asyncio.TimeoutError:
        logger.error("Stripe health check timed out")
        return DependencyStatus(
            name="stripe_api",
            status="unhealthy",
            error_message="Request timed out after 5 seconds"
        )
    except stripe.StripeError as e:
        logger.error(f"Stripe health check failed: {e.__class__.__name__}")
        return DependencyStatus(
            name="stripe_api",
            status="unhealthy",
            error_message=e.__class__.__name__
        )
    except Exception as e:
        logger.error(f"Stripe health check failed: {e}")
        return DependencyStatus(
            name="stripe_api",
            status="unhealthy",
            error_message=str(e)
        )


async def check_all_dependencies() -> Dict[str, DependencyStatus]:
    """
    Run all dependency checks concurrently

    Returns:
        Mapping of dependency name to status
    """
    results = await asyncio.gather(
        check_supabase(),
        check_stripe_api(),
        return_exceptions=True
    )

    dependencies: Dict[str, DependencyStatus] = {}
    dep_names = ["supabase", "stripe_api"]

    for name, result in zip(dep_names, results):
        if isinstance(result, Exception):
            logger.error(f"Unexpected error checking {name}: {result}")
            dependencies[name] = DependencyStatus(
                name=name,
                status="unhealthy",
                error_message=f"Unexpected error: {str(result)}"
            )
        else:
            dependencies[name] = result

    return dependencies


def determine_overall_status(dependencies: Dict[str, DependencyStatus]) -> str:
    """
    Determine overall system status based on dependency health

    Critical services: Supabase
    Non-critical services: Stripe API

    Rules:
    - Any critical service unhealthy → "unhealthy"
    - Any other service degraded/unhealthy → "degraded"
    - All healthy → "healthy"
    """
    critical_services = ["supabase"]

    for service in critical_services:
        if service in dependencies:
            if dependencies[service].status == "unhealthy":
                return "unhealthy"

    degraded_count = sum(
        1 for dep in dependencies.values()
        if dep.status in ["degraded", "unhealthy"]
    )

    if degraded_count >= 1:
        return "degraded"

    return "healthy"


# ============================================================================
# API Endpoints
# ============================================================================

@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic application health status and uptime"
)
async def basic_health_check() -> HealthResponse:
    """
    Basic health check endpoint

    Always returns 200 OK with current status.
    Does not check external dependencies.
    """
    uptime = time.time() - APP_START_TIME

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=__version__,
        uptime_seconds=round(uptime, 2)
    )


@router.get(
    "/dependencies",
    response_model=DependencyHealth,
    status_code=status.HTTP_200_OK,
    summary="Dependency health check",
    description="Checks external dependencies and returns detailed status"
)
async def dependency_health_check() -> DependencyHealth:
    """
    Dependency health check endpoint

    Checks:
    - Supabase database
    - Stripe API

    Results are cached for 30 seconds to avoid overwhelming external services.
    Always returns 200 OK with detailed status information.
    """
    global _dependency_cache, _cache_timestamp

    current_time = time.time()
    if _dependency_cache and (current_time - _cache_timestamp) < CACHE_TTL_SECONDS:
        logger.debug("Returning cached dependency health check results")
        return _dependency_cache

    logger.info("Performing dependency health checks")
    dependencies = await check_all_dependencies()

    response = DependencyHealth(
        overall_status=determine_overall_status(dependencies),
        dependencies=dependencies,
        checked_at=datetime.utcnow()
    )

    _dependency_cache = response
    _cache_timestamp = current_time

    # Log failures (not successful checks - too noisy)
    unhealthy_deps = [
        name for name, dep in dependencies.items()
        if dep.status == "unhealthy"
    ]
    if unhealthy_deps:
        logger.warning(f"Unhealthy dependencies: {', '.join(unhealthy_deps)}")

    return response
