# app/services/availability.py
"""
Booking availability for spots.

Bookings are inclusive calendar-date ranges. Two ranges [s1, e1] and
[s2, e2] overlap when ``s1 <= e2 and e1 >= s2``, so a stay ending on the
5th and one starting on the 5th conflict, while one starting on the 6th
does not.

``reserve_spot`` is the only way bookings get written. It runs the
existence, ownership, range and conflict checks and the insert under a
per-spot lock in a fresh transaction, so two overlapping requests can
never both succeed.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterator

from sqlalchemy.orm import Session

from app import models
from app.errors import ApiError
from app.ownership import is_owner

logger = logging.getLogger(__name__)

CONFLICT_MESSAGES = {
    "startDate": "Start date conflicts with an existing booking",
    "endDate": "End date conflicts with an existing booking",
}


@dataclass(frozen=True)
class Availability:
    available: bool
    conflicting_fields: Dict[str, str] = field(default_factory=dict)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    return start_a <= end_b and end_a >= start_b


def validate_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ApiError.invalid_input({"endDate": "endDate cannot come before startDate"})


def check_availability(db: Session, spot_id: int, start_date: date, end_date: date) -> Availability:
    validate_date_range(start_date, end_date)
    conflicts = (
        db.query(models.Booking.id)
        .filter(
            models.Booking.spot_id == spot_id,
            models.Booking.start_date <= end_date,
            models.Booking.end_date >= start_date,
        )
        .count()
    )
    if conflicts:
        return Availability(available=False, conflicting_fields=dict(CONFLICT_MESSAGES))
    return Availability(available=True)


# Per-spot serialization for the check-then-insert sequence. Entries are
# reference counted and dropped once the last holder releases them.
class _SpotLock:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


_spot_locks: Dict[int, _SpotLock] = {}
_spot_locks_guard = threading.Lock()


@contextmanager
def spot_lock(spot_id: int) -> Iterator[None]:
    with _spot_locks_guard:
        entry = _spot_locks.get(spot_id)
        if entry is None:
            entry = _spot_locks[spot_id] = _SpotLock()
        entry.holders += 1
    try:
        with entry.lock:
            yield
    finally:
        with _spot_locks_guard:
            entry.holders -= 1
            if entry.holders == 0:
                del _spot_locks[spot_id]


def reserve_spot(
    db: Session,
    spot_id: int,
    guest_id: int,
    start_date: date,
    end_date: date,
) -> models.Booking:
    """
    Creates a booking for ``guest_id`` on ``spot_id``.

    Raises ApiError: NOT_FOUND when the spot does not exist, FORBIDDEN when
    the guest owns the spot, INVALID_INPUT for an inverted range and
    BOOKING_CONFLICT when the range overlaps an existing booking. Nothing is
    written unless every check passes.
    """
    with spot_lock(spot_id):
        # Reads made earlier in this request (auth, spot lookup) may pin a
        # snapshot that predates bookings committed while we waited
        db.rollback()
        try:
            # Row lock on the spot serializes reservations across processes
            spot = (
                db.query(models.Spot)
                .filter(models.Spot.id == spot_id)
                .with_for_update()
                .first()
            )
            if spot is None:
                raise ApiError.spot_not_found()
            if is_owner(guest_id, spot):
                logger.info("User %s tried to book their own spot %s", guest_id, spot_id)
                raise ApiError.forbidden()

            availability = check_availability(db, spot_id, start_date, end_date)
            if not availability.available:
                logger.info(
                    "Booking conflict on spot %s for %s..%s", spot_id, start_date, end_date
                )
                raise ApiError.booking_conflict(availability.conflicting_fields)

            booking = models.Booking(
                spot_id=spot_id,
                user_id=guest_id,
                start_date=start_date,
                end_date=end_date,
            )
            db.add(booking)
            db.commit()
        except Exception:
            db.rollback()
            raise
    db.refresh(booking)
    logger.info("Booking %s created on spot %s by user %s", booking.id, spot_id, guest_id)
    return booking
