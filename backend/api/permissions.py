from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission
from rest_framework.request import Request

from api.constants import MSG_ACCESS_DENIED, MSG_INSUFFICIENT_PERMISSIONS
from recipes.models import Comment, Media, Recipe
from users.constants import ROLE_ADMIN, ROLE_EDITOR


class Action(str, Enum):
    READ = "read"
    EDIT = "edit"
    DELETE = "delete"


class Kind(str, Enum):
    RECIPE = "recipe"
    COMMENT = "comment"


@dataclass(frozen=True)
class Resource:
    kind: Kind
    owner_id: Optional[int]
    is_public: bool = False


METHOD_ACTIONS = {
    "GET": Action.READ,
    "HEAD": Action.READ,
    "OPTIONS": Action.READ,
    "PUT": Action.EDIT,
    "PATCH": Action.EDIT,
    "POST": Action.EDIT,
    "DELETE": Action.DELETE,
}


def _is_identified(identity: Any) -> bool:
    return bool(identity and getattr(identity, "is_authenticated", False))


def can_access(identity: Any, resource: Resource, action: Action) -> bool:
    identified = _is_identified(identity)
    role = getattr(identity, "role", None) if identified else None

    if role == ROLE_ADMIN:
        return True

    if identified and identity.id == resource.owner_id:
        return True

    if (
        role == ROLE_EDITOR
        and resource.kind is Kind.RECIPE
        and action is Action.EDIT
    ):
        return True

    return action is Action.READ and resource.is_public


def resource_for(obj: Any) -> Resource:
    if isinstance(obj, Recipe):
        return Resource(Kind.RECIPE, obj.author_id, obj.is_public)
    if isinstance(obj, Comment):
        return Resource(Kind.COMMENT, obj.author_id, obj.recipe.is_public)
    if isinstance(obj, Media):
        return resource_for(obj.recipe)
    raise TypeError(f"No access rules for {type(obj).__name__}")


def check_access(identity: Any, obj: Any, action: Action) -> None:
    if not can_access(identity, resource_for(obj), action):
        raise PermissionDenied(MSG_ACCESS_DENIED)


class ResourcePolicy(BasePermission):
    """Object permission backed by `can_access`, evaluated per request."""

    message = MSG_ACCESS_DENIED

    def has_object_permission(
        self,
        request: Request,
        view: Any,
        obj: Any,
    ) -> bool:
        action = METHOD_ACTIONS.get(request.method, Action.EDIT)
        return can_access(request.user, resource_for(obj), action)


class IsAdminRole(BasePermission):
    message = MSG_INSUFFICIENT_PERMISSIONS

    def has_permission(self, request: Request, view: Any) -> bool:
        user = getattr(request, "user", None)
        return bool(
            _is_identified(user)
            and getattr(user, "role", None) == ROLE_ADMIN
        )
