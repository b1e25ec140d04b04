# app/schemas.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date, datetime


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; ORM objects validate by attribute."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserSignup(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    username: str = Field(min_length=4)
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserSummary(CamelModel):
    id: int
    first_name: str
    last_name: str

class UserOut(UserSummary):
    email: EmailStr
    username: str


class SpotCreate(CamelModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    country: str = Field(min_length=1)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    name: str = Field(min_length=1, max_length=49)
    description: str = Field(min_length=1)
    price: float = Field(gt=0)

class SpotOut(SpotCreate):
    id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime

class ImageCreate(BaseModel):
    url: str = Field(min_length=1)

class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    url: str

class SpotDetail(SpotOut):
    num_reviews: int = 0
    avg_star_rating: Optional[float] = None
    images: List[ImageOut] = Field(default_factory=list, alias="Images")
    owner: Optional[UserSummary] = Field(default=None, alias="Owner")


class ReviewCreate(CamelModel):
    review: str = Field(min_length=1)
    stars: int = Field(ge=1, le=5)

class ReviewOut(ReviewCreate):
    id: int
    user_id: int
    spot_id: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = Field(default=None, alias="User")
    images: List[ImageOut] = Field(default_factory=list, alias="Images")


class BookingCreate(CamelModel):
    start_date: date
    end_date: date

class BookingResponse(CamelModel):
    id: int
    spot_id: int
    user_id: int
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime
