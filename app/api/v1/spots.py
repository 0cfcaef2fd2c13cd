"""Spot endpoints, including a spot's images and bookings."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from app.api.deps import CurrentUser, get_booking_service, get_spot_service
from app.models.booking import Booking
from app.models.spot import Spot, SpotImage
from app.schemas.booking import (
    BookingCreate,
    BookingPublicResponse,
    BookingResponse,
    BookingWithUserResponse,
)
from app.schemas.common import MessageResponse
from app.schemas.spot import (
    SpotCreate,
    SpotDetailResponse,
    SpotImageCreate,
    SpotImageResponse,
    SpotListResponse,
    SpotResponse,
)
from app.services.booking_service import BookingService
from app.services.spot_service import SpotService

router = APIRouter()

SpotServiceDep = Annotated[SpotService, Depends(get_spot_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]


@router.get("", response_model=SpotListResponse)
async def list_spots(spot_service: SpotServiceDep) -> dict:
    """Get all spots."""
    return {"Spots": await spot_service.list_spots()}


@router.get("/current", response_model=SpotListResponse)
async def list_my_spots(current_user: CurrentUser, spot_service: SpotServiceDep) -> dict:
    """Get all spots owned by the current user."""
    return {"Spots": await spot_service.list_spots(owner_id=current_user.id)}


@router.get("/{spot_id}", response_model=SpotDetailResponse)
async def get_spot(spot_id: int, spot_service: SpotServiceDep) -> dict:
    """Get details of a spot."""
    return await spot_service.get_spot_details(spot_id)


@router.post("", response_model=SpotResponse)
async def create_spot(
    spot_data: SpotCreate,
    current_user: CurrentUser,
    spot_service: SpotServiceDep,
) -> Spot:
    """Create a spot owned by the current user."""
    return await spot_service.create_spot(current_user, spot_data.model_dump())


@router.put("/{spot_id}", response_model=SpotResponse)
async def update_spot(
    spot_id: int,
    spot_data: SpotCreate,
    current_user: CurrentUser,
    spot_service: SpotServiceDep,
) -> Spot:
    """Replace a spot's attributes. Owner only."""
    return await spot_service.update_spot(spot_id, current_user, spot_data.model_dump())


@router.delete("/{spot_id}", response_model=MessageResponse)
async def delete_spot(
    spot_id: int,
    current_user: CurrentUser,
    spot_service: SpotServiceDep,
) -> dict:
    """Delete a spot with its bookings, images and reviews. Owner only."""
    await spot_service.delete_spot(spot_id, current_user)
    return {"message": "Successfully deleted", "statusCode": status.HTTP_200_OK}


@router.post("/{spot_id}/images", response_model=SpotImageResponse)
async def add_spot_image(
    spot_id: int,
    image_data: SpotImageCreate,
    current_user: CurrentUser,
    spot_service: SpotServiceDep,
) -> SpotImage:
    """Add an image to a spot. Owner only."""
    return await spot_service.add_image(spot_id, current_user, image_data.url, image_data.preview)


@router.get("/{spot_id}/bookings")
async def list_spot_bookings(
    spot_id: int,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> dict[str, list[dict[str, Any]]]:
    """Get all bookings for a spot.

    Booker identities are only included for the privileged view.
    """
    privileged, bookings = await booking_service.list_bookings_for_spot(spot_id, current_user)
    schema = BookingWithUserResponse if privileged else BookingPublicResponse
    return {
        "Bookings": [
            schema.model_validate(booking).model_dump(mode="json", by_alias=True)
            for booking in bookings
        ]
    }


@router.post("/{spot_id}/bookings", response_model=BookingResponse)
async def create_spot_booking(
    spot_id: int,
    booking_data: BookingCreate,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> Booking:
    """Book a spot for a date range."""
    return await booking_service.create_booking(
        spot_id, current_user, booking_data.start_date, booking_data.end_date
    )
