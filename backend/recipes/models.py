from django.conf import settings
from django.core.validators import MaxLengthValidator, MinValueValidator
from django.db import models

from recipes.constants import (
    ALT_TEXT_MAX_LEN,
    CATEGORY_NAME_MAX_LEN,
    COMMENT_MAX_LEN,
    COOK_TIME_MIN,
    MEDIA_FILENAME_MAX_LEN,
    MEDIA_MIME_MAX_LEN,
    MEDIA_PUBLIC_ID_MAX_LEN,
    MEDIA_URL_MAX_LEN,
    PREP_TIME_MIN,
    RECIPE_TITLE_MAX_LEN,
    SERVINGS_MIN,
    TAG_NAME_MAX_LEN,
)
from recipes.validators import (
    validate_ingredient_list,
    validate_optional_ingredient_list,
)

User = settings.AUTH_USER_MODEL


class Tag(models.Model):
    name = models.CharField(
        "Name",
        max_length=TAG_NAME_MAX_LEN,
        unique=True,
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Tag"
        verbose_name_plural = "Tags"

    def __str__(self) -> str:
        return self.name


class Category(models.Model):
    name = models.CharField(
        "Name",
        max_length=CATEGORY_NAME_MAX_LEN,
        unique=True,
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Category"
        verbose_name_plural = "Categories"

    def __str__(self) -> str:
        return self.name


class Recipe(models.Model):
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="recipes",
        verbose_name="Author",
    )
    title_en = models.CharField(
        "Title (EN)",
        max_length=RECIPE_TITLE_MAX_LEN,
        db_index=True,
    )
    title_es = models.CharField(
        "Title (ES)",
        max_length=RECIPE_TITLE_MAX_LEN,
        blank=True,
        null=True,
    )
    ingredients_en = models.JSONField(
        "Ingredients (EN)",
        default=list,
        validators=[validate_ingredient_list],
    )
    ingredients_es = models.JSONField(
        "Ingredients (ES)",
        blank=True,
        null=True,
        validators=[validate_optional_ingredient_list],
    )
    instructions_en = models.TextField("Instructions (EN)")
    instructions_es = models.TextField(
        "Instructions (ES)",
        blank=True,
        null=True,
    )
    prep_time = models.PositiveIntegerField(
        "Prep time, min",
        blank=True,
        null=True,
        validators=[MinValueValidator(PREP_TIME_MIN)],
    )
    cook_time = models.PositiveIntegerField(
        "Cook time, min",
        blank=True,
        null=True,
        validators=[MinValueValidator(COOK_TIME_MIN)],
    )
    servings = models.PositiveIntegerField(
        "Servings",
        blank=True,
        null=True,
        validators=[MinValueValidator(SERVINGS_MIN)],
    )
    tags = models.ManyToManyField(
        Tag,
        related_name="recipes",
        blank=True,
        verbose_name="Tags",
    )
    categories = models.ManyToManyField(
        Category,
        related_name="recipes",
        blank=True,
        verbose_name="Categories",
    )
    is_public = models.BooleanField("Public", default=False, db_index=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)
    updated_at = models.DateTimeField("Updated", auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Recipe"
        verbose_name_plural = "Recipes"

    def __str__(self) -> str:
        return self.title_en


class Comment(models.Model):
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Recipe",
    )
    author = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Author",
    )
    text = models.TextField(
        "Text",
        validators=[MaxLengthValidator(COMMENT_MAX_LEN)],
    )
    created_at = models.DateTimeField("Created", auto_now_add=True)
    updated_at = models.DateTimeField("Updated", auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "Comment"
        verbose_name_plural = "Comments"

    def __str__(self) -> str:
        return f"{self.author} → {self.recipe}"


class Favorite(models.Model):
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="favorites",
    )
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="favorites",
    )
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Favorite"
        verbose_name_plural = "Favorites"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "recipe"],
                name="unique_favorite_user_recipe",
            )
        ]

    def __str__(self) -> str:
        return f"{self.user} → {self.recipe}"


class Media(models.Model):
    class Type(models.TextChoices):
        IMAGE = "image", "Image"
        VIDEO = "video", "Video"

    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="media",
        verbose_name="Recipe",
    )
    url = models.CharField("URL", max_length=MEDIA_URL_MAX_LEN)
    type = models.CharField(
        "Type",
        max_length=8,
        choices=Type.choices,
        default=Type.IMAGE,
    )
    public_id = models.CharField(
        "Storage handle",
        max_length=MEDIA_PUBLIC_ID_MAX_LEN,
        blank=True,
        null=True,
    )
    alt_text = models.CharField(
        "Alt text",
        max_length=ALT_TEXT_MAX_LEN,
        blank=True,
        null=True,
    )
    order = models.PositiveIntegerField("Order", default=0)
    filename = models.CharField(
        "Original filename",
        max_length=MEDIA_FILENAME_MAX_LEN,
        blank=True,
    )
    size = models.PositiveBigIntegerField("Size, bytes", default=0)
    mime_type = models.CharField(
        "MIME type",
        max_length=MEDIA_MIME_MAX_LEN,
        blank=True,
    )
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        ordering = ["order", "id"]
        verbose_name = "Media"
        verbose_name_plural = "Media"
        indexes = [
            models.Index(
                fields=["recipe", "order"],
                name="media_recipe_order_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.filename or self.url
