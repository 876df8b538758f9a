"""
Projection of bilingual records to single-language response shapes.

English fields are always complete; Spanish ones are optional, so every
Spanish value falls back to its English counterpart field by field.
"""

from typing import Any, Optional

from users.constants import LANGUAGE_EN, LANGUAGE_ES

LOCALIZED_FIELDS = ("title", "ingredients", "instructions")
SUPPORTED_LANGUAGES = (LANGUAGE_EN, LANGUAGE_ES)


def normalize_language(language: Optional[str]) -> str:
    return LANGUAGE_ES if language == LANGUAGE_ES else LANGUAGE_EN


def language_fields(language: Optional[str]) -> dict[str, str]:
    suffix = normalize_language(language)
    return {name: f"{name}_{suffix}" for name in LOCALIZED_FIELDS}


def localized_value(entity: Any, name: str, language: Optional[str]) -> Any:
    value = getattr(entity, language_fields(language)[name], None)
    if value in (None, "", []):
        return getattr(entity, f"{name}_{LANGUAGE_EN}")
    return value


def request_language(request: Any, override: Optional[str] = None) -> str:
    if override in SUPPORTED_LANGUAGES:
        return override
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False):
        return normalize_language(getattr(user, "language_pref", None))
    return LANGUAGE_EN


def _names(manager) -> list[str]:
    return [item.name for item in manager.all()]


def _count(entity: Any, name: str) -> int:
    return getattr(entity, f"{name}_count", None) or 0


def project_media(media: Any) -> dict:
    return {
        "id": media.id,
        "recipeId": media.recipe_id,
        "url": media.url,
        "type": media.type,
        "publicId": media.public_id,
        "altText": media.alt_text,
        "order": media.order,
        "filename": media.filename,
        "size": media.size,
        "mimeType": media.mime_type,
        "createdAt": media.created_at,
    }


def project_author(user: Any) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.id, "email": user.email}


def project_recipe(recipe: Any, language: Optional[str] = LANGUAGE_EN) -> dict:
    return {
        "id": recipe.id,
        "title": localized_value(recipe, "title", language),
        "ingredients": localized_value(recipe, "ingredients", language),
        "instructions": localized_value(recipe, "instructions", language),
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
        "servings": recipe.servings,
        "tags": _names(recipe.tags),
        "categories": _names(recipe.categories),
        "isPublic": recipe.is_public,
        "createdAt": recipe.created_at,
        "updatedAt": recipe.updated_at,
        "author": project_author(recipe.author),
        "media": [project_media(item) for item in recipe.media.all()],
        "commentsCount": _count(recipe, "comments"),
        "favoritesCount": _count(recipe, "favorites"),
    }


def project_user(user: Any, fields: tuple = ()) -> dict:
    data = {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "languagePref": user.language_pref,
        "createdAt": user.date_joined,
    }
    if fields:
        data = {key: value for key, value in data.items() if key in fields}
    return data
