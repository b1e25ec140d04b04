# app/services/visibility.py
"""
Which booking fields a viewer may see.

Spot owners get every booking with the guest's identity and timestamps.
Everyone else only learns which dates are taken.
"""
from copy import deepcopy
from typing import Any, Dict, List

from sqlalchemy.orm import Session, joinedload

from app import models
from app.errors import ApiError
from app.ownership import is_owner

OWNER_VIEW_TEMPLATE: Dict[str, Any] = {
    "User": {"id": "", "firstName": "", "lastName": ""},
    "id": "",
    "spotId": "",
    "userId": "",
    "startDate": "",
    "endDate": "",
    "createdAt": "",
    "updatedAt": "",
}


def _or_blank(value):
    return "" if value is None else value


def owner_view(booking: models.Booking) -> Dict[str, Any]:
    view = deepcopy(OWNER_VIEW_TEMPLATE)
    guest = booking.user
    if guest is not None:
        view["User"] = {
            "id": _or_blank(guest.id),
            "firstName": _or_blank(guest.first_name),
            "lastName": _or_blank(guest.last_name),
        }
    view.update(
        id=_or_blank(booking.id),
        spotId=_or_blank(booking.spot_id),
        userId=_or_blank(booking.user_id),
        startDate=_or_blank(booking.start_date),
        endDate=_or_blank(booking.end_date),
        createdAt=_or_blank(booking.created_at),
        updatedAt=_or_blank(booking.updated_at),
    )
    return view


def public_view(booking) -> Dict[str, Any]:
    return {
        "spotId": booking.spot_id,
        "startDate": booking.start_date,
        "endDate": booking.end_date,
    }


def list_bookings_for_viewer(db: Session, spot_id: int, viewer_id: int) -> List[Dict[str, Any]]:
    spot = db.get(models.Spot, spot_id)
    if spot is None:
        raise ApiError.spot_not_found()

    if is_owner(viewer_id, spot):
        bookings = (
            db.query(models.Booking)
            .options(joinedload(models.Booking.user))
            .filter(models.Booking.spot_id == spot_id)
            .order_by(models.Booking.start_date)
            .all()
        )
        return [owner_view(booking) for booking in bookings]

    rows = (
        db.query(models.Booking.spot_id, models.Booking.start_date, models.Booking.end_date)
        .filter(models.Booking.spot_id == spot_id)
        .order_by(models.Booking.start_date)
        .all()
    )
    return [public_view(row) for row in rows]
