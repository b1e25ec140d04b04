# app/routes/users.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app import models, schemas, database, auth
from app.dependencies import get_current_user
from app.errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


def user_to_dict(user: models.User) -> dict:
    return schemas.UserOut.model_validate(user).model_dump(by_alias=True)


def token_response(user: models.User) -> dict:
    access_token = auth.create_access_token(data={"sub": str(user.id)})
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user_to_dict(user),
    }


# User Registration
@router.post("/signup")
def signup_user(user: schemas.UserSignup, db: Session = Depends(database.get_db)):
    existing_users = db.query(models.User).filter(
        or_(models.User.email == user.email, models.User.username == user.username)
    ).all()
    if existing_users:
        errors = {}
        if any(existing.email == user.email for existing in existing_users):
            errors["email"] = "User with that email already exists"
        if any(existing.username == user.username for existing in existing_users):
            errors["username"] = "User with that username already exists"
        raise ApiError.forbidden("User already exists", errors)

    new_user = models.User(
        first_name=user.first_name,
        last_name=user.last_name,
        username=user.username,
        email=user.email,
        password=auth.get_password_hash(user.password),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("User %s signed up", new_user.id)
    return token_response(new_user)


# User Login (JWT)
@router.post("/login")
def login_user(user: schemas.UserLogin, db: Session = Depends(database.get_db)):
    db_user = db.query(models.User).filter(models.User.email == user.email).first()
    if not db_user or not auth.verify_password(user.password, db_user.password):
        raise ApiError.unauthorized("Invalid credentials")
    return token_response(db_user)


@router.get("/me", status_code=status.HTTP_200_OK)
def read_current_user(current_user: models.User = Depends(get_current_user)):
    return {"user": user_to_dict(current_user)}
