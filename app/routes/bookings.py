# app/routes/bookings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload
from app import models, database, schemas
from app.dependencies import get_current_user

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"]
)


# List the Current User's Bookings (with a summary of each Spot)
@router.get("/current")
def list_user_bookings(
    db: Session = Depends(database.get_db),
    current_user: models.User = Depends(get_current_user),
):
    bookings = (
        db.query(models.Booking)
        .options(joinedload(models.Booking.spot))
        .filter(models.Booking.user_id == current_user.id)
        .order_by(models.Booking.start_date)
        .all()
    )

    def format_booking(booking):
        data = schemas.BookingResponse.model_validate(booking).model_dump(by_alias=True)
        spot = booking.spot
        data["Spot"] = {
            "id": spot.id,
            "ownerId": spot.owner_id,
            "name": spot.name,
            "city": spot.city,
            "state": spot.state,
            "country": spot.country,
            "price": spot.price,
        }
        return data

    return {"Bookings": [format_booking(booking) for booking in bookings]}
