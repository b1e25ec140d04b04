# app/ownership.py
"""
Ownership checks for spots and the resources attached to them.

``is_owner(actor_id, resource)`` answers whether the acting user owns a
resource; ``require_owner`` turns a negative answer into a Forbidden error.
"""
from functools import singledispatch

from app import models
from app.errors import ApiError


@singledispatch
def owns(resource, actor_id: int) -> bool:
    raise TypeError(f"No ownership rule for {type(resource).__name__}")


@owns.register
def _(resource: models.Spot, actor_id: int) -> bool:
    return resource.owner_id == actor_id


@owns.register
def _(resource: models.Review, actor_id: int) -> bool:
    return resource.user_id == actor_id


@owns.register
def _(resource: models.Image, actor_id: int) -> bool:
    return resource.user_id == actor_id


def is_owner(actor_id: int, resource) -> bool:
    return owns(resource, actor_id)


def require_owner(actor_id: int, resource) -> None:
    if not is_owner(actor_id, resource):
        raise ApiError.forbidden()
