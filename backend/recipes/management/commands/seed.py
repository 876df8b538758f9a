import json
from pathlib import Path

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from recipes.models import Category, Recipe, Tag
from users.constants import ROLE_ADMIN, ROLE_EDITOR

User = get_user_model()

RECIPE_FIELDS = (
    "title_en",
    "title_es",
    "ingredients_en",
    "ingredients_es",
    "instructions_en",
    "instructions_es",
    "prep_time",
    "cook_time",
    "servings",
    "is_public",
)


class Command(BaseCommand):
    help = "Create the admin and editor accounts and load sample recipes."

    def add_arguments(self, parser):
        parser.add_argument("--path", type=str, default=None)
        parser.add_argument(
            "--admin-email", default="admin@familyrecipes.com"
        )
        parser.add_argument("--admin-password", default="admin123")
        parser.add_argument(
            "--editor-email", default="user@familyrecipes.com"
        )
        parser.add_argument("--editor-password", default="user123")
        parser.add_argument("--truncate", action="store_true")

    def handle(self, *args, **opts):
        path = (
            Path(opts["path"]).expanduser().resolve()
            if opts["path"]
            else Path(settings.BASE_DIR) / "data" / "recipes.json"
        )
        if not path.exists():
            raise CommandError(f"Data file not found: {path}")

        items = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(items, list):
            raise CommandError(f"Expected a list of recipes in {path}")

        with transaction.atomic():
            authors = {
                ROLE_ADMIN: self._account(
                    opts["admin_email"],
                    opts["admin_password"],
                    ROLE_ADMIN,
                ),
                ROLE_EDITOR: self._account(
                    opts["editor_email"],
                    opts["editor_password"],
                    ROLE_EDITOR,
                ),
            }

            if opts["truncate"]:
                Recipe.objects.filter(author__in=authors.values()).delete()

            created = 0
            for item in items:
                author = authors.get(item.get("author"), authors[ROLE_ADMIN])
                if self._load_recipe(item, author):
                    created += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {len(items)} recipes, created {created}, "
                f"total {Recipe.objects.count()}"
            )
        )

    def _account(self, email, password, role):
        user = User.objects.filter(email__iexact=email).first()
        if user is not None:
            self.stdout.write(f"{role} account exists: {user.email}")
            return user
        if role == ROLE_ADMIN:
            user = User.objects.create_superuser(email, password)
        else:
            user = User.objects.create_user(email, password, role=role)
        self.stdout.write(self.style.SUCCESS(f"Created {role}: {user.email}"))
        return user

    def _load_recipe(self, item, author) -> bool:
        title = (item.get("title_en") or "").strip()
        if not title or not item.get("ingredients_en"):
            self.stderr.write(f"Skipping incomplete recipe: {item!r:.60}")
            return False

        defaults = {
            field: item[field] for field in RECIPE_FIELDS if field in item
        }
        recipe, was_created = Recipe.objects.update_or_create(
            author=author,
            title_en=title,
            defaults=defaults,
        )
        recipe.tags.set(
            [Tag.objects.get_or_create(name=name)[0]
             for name in item.get("tags", [])]
        )
        recipe.categories.set(
            [Category.objects.get_or_create(name=name)[0]
             for name in item.get("categories", [])]
        )
        return was_created
