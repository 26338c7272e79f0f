from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status", examples=["healthy"])
    service: str = Field(..., description="Service name", examples=["storefront-catalog"])
    version: str = Field(..., description="Service version", examples=["1.0.0"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="""
    Health check endpoint for monitoring and load balancer health checks.

    Returns the service status, name, and version.
    """
)
def health(request: Request):
    """Health check endpoint"""
    settings = request.app.state.settings
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version
    )
