from fastapi import APIRouter

from villa_onboarding.api.v1.endpoints import onboarding

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(onboarding.router, prefix="/onboarding", tags=["Onboarding"])

__all__ = ["api_router"]
