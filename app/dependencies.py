# app/dependencies.py
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app import auth, database, models
from app.errors import ApiError

logger = logging.getLogger(__name__)

# OAuth2 Bearer Token (For Login); missing tokens are reported by get_current_user
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="users/login", auto_error=False)


def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(database.get_db),
) -> Optional[models.User]:
    if not token:
        return None
    user_id = auth.decode_access_token(token)
    if user_id is None:
        logger.info("Rejected invalid or expired access token")
        return None
    return db.get(models.User, user_id)


# requireAuth: every protected route depends on this
def get_current_user(user: Optional[models.User] = Depends(get_optional_user)) -> models.User:
    if user is None:
        raise ApiError.unauthorized()
    return user
