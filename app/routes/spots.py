# app/routes/spots.py
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from app import models, database, schemas
from app.config import settings
from app.dependencies import get_current_user
from app.errors import ApiError
from app.ownership import is_owner, require_owner
from app.services.availability import reserve_spot
from app.services.visibility import list_bookings_for_viewer

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/spots",
    tags=["Spots"]
)


def get_spot_or_404(db: Session, spot_id: int) -> models.Spot:
    spot = db.get(models.Spot, spot_id)
    if spot is None:
        raise ApiError.spot_not_found()
    return spot


def spot_to_dict(spot: models.Spot) -> dict:
    return schemas.SpotOut.model_validate(spot).model_dump(by_alias=True)


# Public - List Spots (offset/limit pagination only when page and size are both >= 1)
@router.get("")
def list_spots(
    page: int = Query(0, ge=0, le=10),
    size: int = Query(20, ge=0, le=20),
    db: Session = Depends(database.get_db),
):
    query = db.query(models.Spot).order_by(models.Spot.id)
    if page >= 1 and size >= 1:
        query = query.limit(size).offset(size * (page - 1))
    spots = query.all()
    return {"Spots": [spot_to_dict(spot) for spot in spots], "page": page, "size": size}


# Spots owned by the current user
@router.get("/current")
def list_current_user_spots(
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    spots = db.query(models.Spot).filter(models.Spot.owner_id == current_user.id).all()
    return {"Spots": [spot_to_dict(spot) for spot in spots]}


@router.get("/{spot_id}")
def get_spot(spot_id: int, db: Session = Depends(database.get_db)):
    spot = (
        db.query(models.Spot)
        .options(joinedload(models.Spot.owner), joinedload(models.Spot.images))
        .filter(models.Spot.id == spot_id)
        .first()
    )
    if spot is None:
        raise ApiError.spot_not_found()

    num_reviews, avg_stars = (
        db.query(func.count(models.Review.id), func.avg(models.Review.stars))
        .filter(models.Review.spot_id == spot_id)
        .one()
    )
    detail = schemas.SpotDetail.model_validate(spot)
    detail.num_reviews = num_reviews
    detail.avg_star_rating = float(avg_stars) if avg_stars is not None else None
    return detail.model_dump(by_alias=True)


@router.post("")
def create_spot(
    spot: schemas.SpotCreate,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    new_spot = models.Spot(owner_id=current_user.id, **spot.model_dump())
    db.add(new_spot)
    db.commit()
    db.refresh(new_spot)
    logger.info("Spot %s created by user %s", new_spot.id, current_user.id)
    return spot_to_dict(new_spot)


# Owner Only - Update a Spot
@router.put("/{spot_id}")
def update_spot(
    spot_id: int,
    spot: schemas.SpotCreate,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    spot_to_update = get_spot_or_404(db, spot_id)
    require_owner(current_user.id, spot_to_update)

    for key, value in spot.model_dump().items():
        setattr(spot_to_update, key, value)
    db.commit()
    db.refresh(spot_to_update)
    return spot_to_dict(spot_to_update)


# Owner Only - Delete a Spot
@router.delete("/{spot_id}")
def delete_spot(
    spot_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    spot_to_delete = get_spot_or_404(db, spot_id)
    require_owner(current_user.id, spot_to_delete)

    db.delete(spot_to_delete)
    db.commit()
    logger.info("Spot %s deleted by user %s", spot_id, current_user.id)
    return {"message": "Successfully deleted", "statusCode": 200}


@router.get("/{spot_id}/reviews")
def list_spot_reviews(spot_id: int, db: Session = Depends(database.get_db)):
    get_spot_or_404(db, spot_id)
    reviews = (
        db.query(models.Review)
        .options(joinedload(models.Review.user), joinedload(models.Review.images))
        .filter(models.Review.spot_id == spot_id)
        .order_by(models.Review.id)
        .all()
    )
    return {
        "Reviews": [
            schemas.ReviewOut.model_validate(review).model_dump(by_alias=True)
            for review in reviews
        ]
    }


@router.post("/{spot_id}/reviews")
def create_spot_review(
    spot_id: int,
    review: schemas.ReviewCreate,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    get_spot_or_404(db, spot_id)

    new_review = models.Review(spot_id=spot_id, user_id=current_user.id, **review.model_dump())
    db.add(new_review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ApiError.forbidden("User already has a review for this spot")
    db.refresh(new_review)
    return schemas.ReviewOut.model_validate(new_review).model_dump(by_alias=True, exclude={"user", "images"})


# Owner Only - Attach an Image to a Spot
@router.post("/{spot_id}/images")
def add_spot_image(
    spot_id: int,
    image: schemas.ImageCreate,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    spot = get_spot_or_404(db, spot_id)
    require_owner(current_user.id, spot)

    image_count = db.query(models.Image).filter(models.Image.spot_id == spot_id).count()
    if image_count >= settings.MAX_IMAGES_PER_RESOURCE:
        raise ApiError.forbidden("Maximum number of images for this resource was reached")

    new_image = models.Image(url=image.url, spot_id=spot_id, user_id=current_user.id)
    db.add(new_image)
    db.commit()
    db.refresh(new_image)
    return {"id": new_image.id, "imageableId": new_image.spot_id, "url": new_image.url}


# Spot existence and ownership are settled before the request body is validated
def get_bookable_spot(
    spot_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
) -> models.Spot:
    spot = get_spot_or_404(db, spot_id)
    if is_owner(current_user.id, spot):
        raise ApiError.forbidden()
    return spot


# Book a Spot (any authenticated user except the owner)
@router.post("/{spot_id}/bookings", dependencies=[Depends(get_bookable_spot)])
def create_spot_booking(
    spot_id: int,
    booking: schemas.BookingCreate,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    # reserve_spot repeats both checks under the spot lock
    new_booking = reserve_spot(
        db,
        spot_id=spot_id,
        guest_id=current_user.id,
        start_date=booking.start_date,
        end_date=booking.end_date,
    )
    return schemas.BookingResponse.model_validate(new_booking).model_dump(by_alias=True)


# Owners see guests and timestamps; everyone else sees taken dates only
@router.get("/{spot_id}/bookings")
def list_spot_bookings(
    spot_id: int,
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    return {"Bookings": list_bookings_for_viewer(db, spot_id, current_user.id)}
