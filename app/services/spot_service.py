"""Spot queries with review aggregation, and spot lifecycle operations."""

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import Forbidden, SpotNotFound
from app.models.booking import Booking
from app.models.review import Review
from app.models.spot import Spot, SpotImage
from app.models.user import User

logger = logging.getLogger(__name__)

IMAGE_OWNERSHIP_MESSAGE = "Spot must belong to the current user to add an image"


def _avg_rating_column():
    return (
        select(func.round(func.avg(Review.stars), 2))
        .where(Review.spot_id == Spot.id)
        .correlate(Spot)
        .scalar_subquery()
    )


def _preview_image_column():
    return (
        select(SpotImage.url)
        .where(SpotImage.spot_id == Spot.id, SpotImage.preview.is_(True))
        .order_by(SpotImage.id)
        .limit(1)
        .correlate(Spot)
        .scalar_subquery()
    )


def _spot_attributes(spot: Spot) -> dict[str, Any]:
    return {
        "id": spot.id,
        "owner_id": spot.owner_id,
        "address": spot.address,
        "city": spot.city,
        "state": spot.state,
        "country": spot.country,
        "lat": spot.lat,
        "lng": spot.lng,
        "name": spot.name,
        "description": spot.description,
        "price": spot.price,
        "created_at": spot.created_at,
        "updated_at": spot.updated_at,
    }


class SpotService:
    """Spot reads and writes scoped to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_spots(self, owner_id: int | None = None) -> list[dict[str, Any]]:
        """Spots ordered by id with ``avg_rating`` and ``preview_image``."""
        query = select(
            Spot,
            _avg_rating_column().label("avg_rating"),
            _preview_image_column().label("preview_image"),
        ).order_by(Spot.id)
        if owner_id is not None:
            query = query.where(Spot.owner_id == owner_id)

        result = await self.db.execute(query)
        return [
            {
                **_spot_attributes(spot),
                "avg_rating": avg_rating,
                "preview_image": preview_image,
            }
            for spot, avg_rating, preview_image in result.all()
        ]

    async def get_spot_details(self, spot_id: int) -> dict[str, Any]:
        """Spot with images, owner and review statistics."""
        result = await self.db.execute(
            select(Spot)
            .where(Spot.id == spot_id)
            .options(selectinload(Spot.images), selectinload(Spot.owner))
        )
        spot = result.scalar_one_or_none()
        if spot is None:
            raise SpotNotFound()

        stats = await self.db.execute(
            select(func.count(Review.id), func.avg(Review.stars)).where(Review.spot_id == spot_id)
        )
        num_reviews, avg_stars = stats.one()

        return {
            **_spot_attributes(spot),
            "num_reviews": num_reviews,
            "avg_rating": round(float(avg_stars), 2) if avg_stars is not None else None,
            "spot_images": sorted(spot.images, key=lambda image: image.id),
            "owner": spot.owner,
        }

    async def get_spot(self, spot_id: int) -> Spot:
        result = await self.db.execute(select(Spot).where(Spot.id == spot_id))
        spot = result.scalar_one_or_none()
        if spot is None:
            raise SpotNotFound()
        return spot

    async def get_owned_spot(self, spot_id: int, user: User) -> Spot:
        """Fetch a spot the user must own.

        Raises:
            SpotNotFound: If the spot does not exist
            Forbidden: If the user is not the owner
        """
        spot = await self.get_spot(spot_id)
        if spot.owner_id != user.id:
            raise Forbidden()
        return spot

    async def create_spot(self, owner: User, attributes: dict[str, Any]) -> Spot:
        spot = Spot(owner_id=owner.id, **attributes)
        self.db.add(spot)
        await self.db.flush()
        await self.db.refresh(spot)
        logger.info("Spot %s created by user %s", spot.id, owner.id)
        return spot

    async def update_spot(self, spot_id: int, user: User, attributes: dict[str, Any]) -> Spot:
        spot = await self.get_owned_spot(spot_id, user)
        for field, value in attributes.items():
            setattr(spot, field, value)
        await self.db.flush()
        await self.db.refresh(spot)
        return spot

    async def delete_spot(self, spot_id: int, user: User) -> None:
        """Delete a spot together with its bookings, images and reviews."""
        spot = await self.get_owned_spot(spot_id, user)
        for model in (Booking, SpotImage, Review):
            await self.db.execute(delete(model).where(model.spot_id == spot.id))
        await self.db.delete(spot)
        await self.db.flush()
        logger.info("Spot %s deleted by user %s", spot_id, user.id)

    async def add_image(self, spot_id: int, user: User, url: str, preview: bool) -> SpotImage:
        """Attach an image; non-owners get a 404 like a missing spot."""
        spot = await self.get_spot(spot_id)
        if spot.owner_id != user.id:
            raise SpotNotFound(IMAGE_OWNERSHIP_MESSAGE)

        image = SpotImage(spot_id=spot.id, url=url, preview=preview)
        self.db.add(image)
        await self.db.flush()
        return image
