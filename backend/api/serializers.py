import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework import serializers

from api.constants import (
    MAX_PAGE_SIZE,
    MSG_EMAIL_TAKEN,
    MSG_FAVORITE_EXISTS,
    MSG_INVALID_INVITE,
    PASSWORD_MIN_LEN,
    SHARE_MESSAGE_MAX_LEN,
)
from api.exceptions import BadRequest, Conflict
from api.fields import MediaFileField
from api.localization import (
    SUPPORTED_LANGUAGES,
    project_author,
    project_recipe,
    project_user,
)
from recipes.constants import (
    CATEGORY_NAME_MAX_LEN,
    COMMENT_MAX_LEN,
    COOK_TIME_MIN,
    INGREDIENT_MAX_LEN,
    PREP_TIME_MIN,
    RECIPE_TITLE_MAX_LEN,
    SERVINGS_MIN,
    TAG_NAME_MAX_LEN,
)
from recipes.models import Category, Comment, Favorite, Recipe, Tag
from users.constants import LANGUAGE_EN, NAME_MAX_LEN

logger = logging.getLogger(__name__)

User = get_user_model()


class UserInfoSerializer(serializers.BaseSerializer):
    """Public user shape; credentials and invite data never leave here."""

    def to_representation(self, instance):
        return project_user(instance, self.context.get("fields", ()))


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(
        error_messages={"invalid": "Invalid email format"},
    )
    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LEN,
        trim_whitespace=False,
        error_messages={
            "min_length": "Password must be at least 8 characters",
        },
    )
    name = serializers.CharField(
        max_length=NAME_MAX_LEN,
        error_messages={"blank": "Name is required"},
    )
    inviteToken = serializers.CharField(
        error_messages={"blank": "Invite token is required"},
    )
    languagePref = serializers.ChoiceField(
        choices=SUPPORTED_LANGUAGES,
        default=LANGUAGE_EN,
    )

    def validate_email(self, value):
        return value.strip().lower()

    def create(self, validated_data):
        email = validated_data["email"]
        with transaction.atomic():
            inviter = (
                User.objects.with_live_invite(validated_data["inviteToken"])
                .select_for_update()
                .first()
            )
            if inviter is None:
                raise BadRequest(MSG_INVALID_INVITE)

            if User.objects.filter(email__iexact=email).exists():
                raise Conflict(MSG_EMAIL_TAKEN)

            try:
                with transaction.atomic():
                    user = User.objects.create_user(
                        email=email,
                        password=validated_data["password"],
                        name=validated_data["name"],
                        language_pref=validated_data["languagePref"],
                        role=User.Role.VIEWER,
                        invited_by=inviter,
                    )
            except IntegrityError:
                raise Conflict(MSG_EMAIL_TAKEN)

            inviter.clear_invite()
        logger.info("Registered %s (invited by %s)", user.email, inviter.id)
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(
        error_messages={"invalid": "Invalid email format"},
    )
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={"blank": "Password is required"},
    )


class InviteSerializer(serializers.Serializer):
    email = serializers.EmailField(
        error_messages={"invalid": "Invalid email format"},
    )

    def validate_email(self, value):
        return value.strip().lower()


class ProfileSerializer(serializers.ModelSerializer):
    languagePref = serializers.ChoiceField(
        source="language_pref",
        choices=SUPPORTED_LANGUAGES,
        required=False,
    )

    class Meta:
        model = User
        fields = ("name", "languagePref")
        extra_kwargs = {"name": {"required": False}}

    def to_representation(self, instance):
        return project_user(instance)


class RecipeSerializer(serializers.BaseSerializer):
    """Single-language recipe view for the language in the context."""

    def to_representation(self, instance):
        return project_recipe(instance, self.context.get("language"))


def _unique(values):
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class RecipeWriteSerializer(serializers.ModelSerializer):
    titleEn = serializers.CharField(
        source="title_en",
        max_length=RECIPE_TITLE_MAX_LEN,
        error_messages={
            "required": "English title is required",
            "blank": "English title is required",
        },
    )
    titleEs = serializers.CharField(
        source="title_es",
        max_length=RECIPE_TITLE_MAX_LEN,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    ingredientsEn = serializers.ListField(
        source="ingredients_en",
        child=serializers.CharField(max_length=INGREDIENT_MAX_LEN),
        allow_empty=False,
        error_messages={
            "required": "At least one English ingredient is required",
            "empty": "At least one English ingredient is required",
        },
    )
    ingredientsEs = serializers.ListField(
        source="ingredients_es",
        child=serializers.CharField(max_length=INGREDIENT_MAX_LEN),
        required=False,
        allow_null=True,
    )
    instructionsEn = serializers.CharField(
        source="instructions_en",
        error_messages={
            "required": "English instructions are required",
            "blank": "English instructions are required",
        },
    )
    instructionsEs = serializers.CharField(
        source="instructions_es",
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    prepTime = serializers.IntegerField(
        source="prep_time",
        min_value=PREP_TIME_MIN,
        required=False,
        allow_null=True,
    )
    cookTime = serializers.IntegerField(
        source="cook_time",
        min_value=COOK_TIME_MIN,
        required=False,
        allow_null=True,
    )
    servings = serializers.IntegerField(
        min_value=SERVINGS_MIN,
        required=False,
        allow_null=True,
    )
    tags = serializers.ListField(
        child=serializers.CharField(max_length=TAG_NAME_MAX_LEN),
        required=False,
    )
    categories = serializers.ListField(
        child=serializers.CharField(max_length=CATEGORY_NAME_MAX_LEN),
        required=False,
    )
    isPublic = serializers.BooleanField(source="is_public", required=False)

    class Meta:
        model = Recipe
        fields = (
            "titleEn",
            "titleEs",
            "ingredientsEn",
            "ingredientsEs",
            "instructionsEn",
            "instructionsEs",
            "prepTime",
            "cookTime",
            "servings",
            "tags",
            "categories",
            "isPublic",
        )

    @staticmethod
    def _set_labels(recipe, tags, categories):
        if tags is not None:
            recipe.tags.set(
                [Tag.objects.get_or_create(name=name)[0]
                 for name in _unique(tags)]
            )
        if categories is not None:
            recipe.categories.set(
                [Category.objects.get_or_create(name=name)[0]
                 for name in _unique(categories)]
            )

    @transaction.atomic
    def create(self, validated_data):
        tags = validated_data.pop("tags", [])
        categories = validated_data.pop("categories", [])
        recipe = Recipe.objects.create(**validated_data)
        self._set_labels(recipe, tags, categories)
        return recipe

    @transaction.atomic
    def update(self, instance, validated_data):
        tags = validated_data.pop("tags", None)
        categories = validated_data.pop("categories", None)
        instance = super().update(instance, validated_data)
        self._set_labels(instance, tags, categories)
        return instance

    def to_representation(self, instance):
        return RecipeSerializer(instance, context=self.context).data


class RecipeListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)
    tag = serializers.CharField(required=False, allow_blank=True)
    language = serializers.ChoiceField(
        choices=SUPPORTED_LANGUAGES,
        required=False,
    )
    page = serializers.IntegerField(min_value=1, required=False)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        required=False,
    )


class CommentSerializer(serializers.ModelSerializer):
    content = serializers.CharField(
        source="text",
        max_length=COMMENT_MAX_LEN,
        error_messages={
            "required": "Comment cannot be empty",
            "blank": "Comment cannot be empty",
            "max_length": "Comment too long",
        },
    )

    class Meta:
        model = Comment
        fields = ("content",)

    def to_representation(self, instance):
        return {
            "id": instance.id,
            "recipeId": instance.recipe_id,
            "content": instance.text,
            "createdAt": instance.created_at,
            "updatedAt": instance.updated_at,
            "author": project_author(instance.author),
        }


class FavoriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Favorite
        fields = ("user", "recipe")
        validators = []

    def validate(self, attrs):
        exists = Favorite.objects.filter(
            user=attrs["user"],
            recipe=attrs["recipe"],
        ).exists()
        if exists:
            raise Conflict(MSG_FAVORITE_EXISTS)
        return attrs

    def create(self, validated_data):
        try:
            with transaction.atomic():
                return Favorite.objects.create(**validated_data)
        except IntegrityError:
            raise Conflict(MSG_FAVORITE_EXISTS)

    def to_representation(self, instance):
        return {
            "id": instance.id,
            "userId": instance.user_id,
            "recipeId": instance.recipe_id,
            "createdAt": instance.created_at,
        }


class MediaUploadSerializer(serializers.Serializer):
    file = MediaFileField()
    altText = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=255,
    )
    order = serializers.IntegerField(min_value=0, required=False)


class EmailShareSerializer(serializers.Serializer):
    email = serializers.EmailField(
        error_messages={"invalid": "Invalid email format"},
    )
    message = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=SHARE_MESSAGE_MAX_LEN,
        error_messages={"max_length": "Message too long"},
    )
