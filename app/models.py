# app/models.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.database import Base
import datetime


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash

    spots = relationship("Spot", back_populates="owner")
    bookings = relationship("Booking", back_populates="user")


class Spot(TimestampMixin, Base):
    __tablename__ = "spots"
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    country = Column(String, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    name = Column(String(50), nullable=False)
    description = Column(String, nullable=False)
    price = Column(Float, nullable=False)

    owner = relationship("User", back_populates="spots")
    bookings = relationship("Booking", back_populates="spot", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="spot", cascade="all, delete-orphan")
    images = relationship("Image", back_populates="spot", cascade="all, delete-orphan")


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True, index=True)
    spot_id = Column(Integer, ForeignKey("spots.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    spot = relationship("Spot", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="check_booking_date_order"),
        Index("ix_bookings_spot_dates", "spot_id", "start_date", "end_date"),
    )


class Review(TimestampMixin, Base):
    __tablename__ = "reviews"
    id = Column(Integer, primary_key=True, index=True)
    spot_id = Column(Integer, ForeignKey("spots.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    review = Column(String, nullable=False)
    stars = Column(Integer, nullable=False)

    spot = relationship("Spot", back_populates="reviews")
    user = relationship("User")
    images = relationship("Image", back_populates="review", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "spot_id", name="uq_review_user_spot"),
        CheckConstraint("stars BETWEEN 1 AND 5", name="check_review_stars"),
    )


class Image(TimestampMixin, Base):
    __tablename__ = "images"
    id = Column(Integer, primary_key=True, index=True)
    url = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    spot_id = Column(Integer, ForeignKey("spots.id", ondelete="CASCADE"), nullable=True, index=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=True, index=True)

    spot = relationship("Spot", back_populates="images")
    review = relationship("Review", back_populates="images")
