"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, spots

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Spots, spot images and spot bookings
api_router.include_router(spots.router, prefix="/spots", tags=["Spots"])
