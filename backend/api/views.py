import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.core.mail import send_mail
from django.db.models import Count, Max
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotFound,
)
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import (
    AllowAny,
    IsAuthenticated,
    IsAuthenticatedOrReadOnly,
)
from rest_framework.response import Response
from rest_framework.views import APIView

from api.authentication import (
    OptionalAuthForReadsMixin,
    OptionalBearerTokenAuthentication,
)
from api.constants import (
    MSG_COMMENT_NOT_FOUND,
    MSG_EMAIL_INVITED,
    MSG_FAVORITE_NOT_FOUND,
    MSG_INVALID_CREDENTIALS,
    MSG_MEDIA_NOT_FOUND,
    MSG_NO_FILE,
    MSG_RECIPE_NOT_FOUND,
    MSG_UPLOAD_FAILED,
    UPLOAD_FIELD,
)
from api.exceptions import BadRequest, QueryValidationError
from api.filters import RecipeFilter
from api.localization import project_media, request_language
from api.media_host import UploadError, get_media_host, media_folder
from api.pagination import RecipePagination
from api.permissions import (
    Action,
    IsAdminRole,
    ResourcePolicy,
    can_access,
    check_access,
    resource_for,
)
from api.serializers import (
    CommentSerializer,
    EmailShareSerializer,
    FavoriteSerializer,
    InviteSerializer,
    LoginSerializer,
    MediaUploadSerializer,
    ProfileSerializer,
    RecipeListQuerySerializer,
    RecipeSerializer,
    RecipeWriteSerializer,
    RegisterSerializer,
    UserInfoSerializer,
)
from recipes.models import Comment, Favorite, Media, Recipe
from users.constants import INVITE_TOKEN_TTL
from users.tokens import issue_session_token, verify_password

logger = logging.getLogger(__name__)

User = get_user_model()

REGISTER_USER_FIELDS = ("id", "email", "name", "role", "languagePref")
LOGIN_USER_FIELDS = ("id", "email", "role", "languagePref")
ME_USER_FIELDS = (
    "id",
    "email",
    "name",
    "role",
    "languagePref",
    "createdAt",
)


class MediaHostError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = MSG_UPLOAD_FAILED
    default_code = "media_host_error"


def recipe_queryset():
    return (
        Recipe.objects.all()
        .select_related("author")
        .prefetch_related("tags", "categories", "media")
        .annotate(
            comments_count=Count("comments", distinct=True),
            favorites_count=Count("favorites", distinct=True),
        )
        .order_by("-created_at", "-id")
    )


def get_recipe_or_404(pk) -> Recipe:
    recipe = recipe_queryset().filter(pk=pk).first()
    if recipe is None:
        raise NotFound(MSG_RECIPE_NOT_FOUND)
    return recipe


def user_data(user, fields) -> dict:
    return UserInfoSerializer(user, context={"fields": fields}).data


class AuthViewSet(viewsets.ViewSet):
    permission_classes = (AllowAny,)

    @action(
        detail=False,
        methods=["post"],
        authentication_classes=[OptionalBearerTokenAuthentication],
        url_path="register",
    )
    def register(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {
                "message": "User registered successfully",
                "token": issue_session_token(user),
                "user": user_data(user, REGISTER_USER_FIELDS),
            },
            status=status.HTTP_201_CREATED,
        )

    @action(
        detail=False,
        methods=["post"],
        authentication_classes=[OptionalBearerTokenAuthentication],
        url_path="login",
    )
    def login(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"].strip().lower()
        password = serializer.validated_data["password"]

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for %s", email)
            raise AuthenticationFailed(MSG_INVALID_CREDENTIALS)

        update_last_login(None, user)
        return Response(
            {
                "message": "Login successful",
                "token": issue_session_token(user),
                "user": user_data(user, LOGIN_USER_FIELDS),
            }
        )

    @action(
        detail=False,
        methods=["post"],
        permission_classes=[IsAuthenticated, IsAdminRole],
        url_path="invite",
    )
    def invite(self, request):
        serializer = InviteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        if User.objects.filter(email__iexact=email).exists():
            raise BadRequest(MSG_EMAIL_INVITED)

        inviter = request.user
        token = inviter.issue_invite()
        invite_url = f"{settings.FRONTEND_URL.rstrip('/')}/register?token={token}"
        days = INVITE_TOKEN_TTL.days
        send_mail(
            subject="You're invited to join Family Recipes!",
            message=(
                "You've been invited to join our family recipe sharing "
                f"platform.\n\nRegister here: {invite_url}\n\n"
                f"This link will expire in {days} days."
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email],
            html_message=(
                "<h2>Welcome to Family Recipes!</h2>"
                "<p>You've been invited to join our family recipe sharing "
                "platform.</p>"
                f'<p><a href="{invite_url}">Accept Invitation</a></p>'
                f"<p>This link will expire in {days} days.</p>"
            ),
        )
        logger.info("Invitation for %s issued by %s", email, inviter.id)
        return Response(
            {
                "message": "Invitation sent successfully",
                "expiresAt": inviter.invite_token_expires,
            }
        )

    @action(
        detail=False,
        methods=["get", "put"],
        permission_classes=[IsAuthenticated],
        url_path="me",
    )
    def me(self, request):
        if request.method == "PUT":
            serializer = ProfileSerializer(
                request.user,
                data=request.data,
                partial=True,
            )
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(
                {
                    "message": "Profile updated successfully",
                    "user": user_data(request.user, ME_USER_FIELDS),
                }
            )
        return Response({"user": user_data(request.user, ME_USER_FIELDS)})


class RecipeViewSet(OptionalAuthForReadsMixin, viewsets.ModelViewSet):
    permission_classes = (IsAuthenticatedOrReadOnly, ResourcePolicy)
    filterset_class = RecipeFilter
    pagination_class = RecipePagination
    lookup_value_regex = r"\d+"
    http_method_names = (
        "get", "post", "put", "patch", "delete", "head", "options",
    )

    def get_queryset(self):
        return recipe_queryset()

    def get_object(self):
        recipe = get_recipe_or_404(self.kwargs[self.lookup_field])
        self.check_object_permissions(self.request, recipe)
        return recipe

    def get_serializer_class(self):
        if self.action in ("list", "retrieve", "my"):
            return RecipeSerializer
        return RecipeWriteSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["language"] = request_language(
            self.request,
            self.request.query_params.get("language"),
        )
        return context

    def list(self, request, *args, **kwargs):
        params = RecipeListQuerySerializer(data=request.query_params)
        if not params.is_valid():
            raise QueryValidationError(params.errors)

        queryset = self.filter_queryset(
            self.get_queryset().filter(is_public=True)
        )
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        recipe = self.get_object()
        return Response({"recipe": self.get_serializer(recipe).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        recipe = serializer.save(author=request.user)
        logger.info("Recipe %s created by %s", recipe.id, request.user.id)
        return Response(
            {
                "message": "Recipe created successfully",
                "recipe": self._fresh(recipe),
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        recipe = self.get_object()
        serializer = self.get_serializer(
            recipe,
            data=request.data,
            partial=True,
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {
                "message": "Recipe updated successfully",
                "recipe": self._fresh(recipe),
            }
        )

    def destroy(self, request, *args, **kwargs):
        recipe = self.get_object()
        recipe_id = recipe.id
        public_ids = list(
            recipe.media.exclude(public_id__isnull=True)
            .exclude(public_id="")
            .values_list("public_id", flat=True)
        )
        recipe.delete()
        logger.info("Recipe %s deleted by %s", recipe_id, request.user.id)

        host = get_media_host()
        for public_id in public_ids:
            try:
                host.destroy(public_id)
            except UploadError:
                logger.warning(
                    "Media %s of deleted recipe %s left on host",
                    public_id,
                    recipe_id,
                    exc_info=True,
                )
        return Response({"message": "Recipe deleted successfully"})

    @action(
        detail=False,
        methods=["get"],
        permission_classes=[IsAuthenticated],
        optional_auth_methods=(),
        url_path="my",
    )
    def my(self, request):
        queryset = self.get_queryset().filter(author=request.user)
        serializer = self.get_serializer(queryset, many=True)
        return Response({"recipes": serializer.data})

    def _fresh(self, recipe):
        return RecipeSerializer(
            get_recipe_or_404(recipe.pk),
            context=self.get_serializer_context(),
        ).data


class CommentView(OptionalAuthForReadsMixin, APIView):
    """
    Comments of a recipe.

    GET and POST address the parent recipe id, PUT and DELETE address the
    comment id.
    """

    permission_classes = (IsAuthenticatedOrReadOnly,)

    @staticmethod
    def _comment_or_404(pk) -> Comment:
        comment = (
            Comment.objects.select_related("author", "recipe")
            .filter(pk=pk)
            .first()
        )
        if comment is None:
            raise NotFound(MSG_COMMENT_NOT_FOUND)
        return comment

    def get(self, request, pk):
        recipe = get_recipe_or_404(pk)
        check_access(request.user, recipe, Action.READ)
        comments = recipe.comments.select_related("author").order_by(
            "created_at", "id"
        )
        return Response(
            {"comments": CommentSerializer(comments, many=True).data}
        )

    def post(self, request, pk):
        recipe = get_recipe_or_404(pk)
        check_access(request.user, recipe, Action.READ)
        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = serializer.save(recipe=recipe, author=request.user)
        return Response(
            {
                "message": "Comment added successfully",
                "comment": CommentSerializer(comment).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def put(self, request, pk):
        comment = self._comment_or_404(pk)
        check_access(request.user, comment, Action.EDIT)
        serializer = CommentSerializer(comment, data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = serializer.save()
        return Response(
            {
                "message": "Comment updated successfully",
                "comment": CommentSerializer(comment).data,
            }
        )

    def delete(self, request, pk):
        comment = self._comment_or_404(pk)
        check_access(request.user, comment, Action.DELETE)
        comment.delete()
        return Response({"message": "Comment deleted successfully"})


class FavoriteListView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        recipe_ids = list(
            Favorite.objects.filter(user=request.user)
            .order_by("-created_at", "-id")
            .values_list("recipe_id", flat=True)
        )
        recipes = recipe_queryset().in_bulk(recipe_ids)
        visible = [
            recipes[pk]
            for pk in recipe_ids
            if pk in recipes
            and can_access(
                request.user, resource_for(recipes[pk]), Action.READ
            )
        ]
        serializer = RecipeSerializer(
            visible,
            many=True,
            context={"language": request_language(request)},
        )
        return Response({"recipes": serializer.data})


class FavoriteDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, pk):
        recipe = get_recipe_or_404(pk)
        serializer = FavoriteSerializer(
            data={"user": request.user.id, "recipe": recipe.id},
        )
        serializer.is_valid(raise_exception=True)
        check_access(request.user, recipe, Action.READ)
        favorite = serializer.save()
        return Response(
            {
                "message": "Recipe added to favorites",
                "favorite": FavoriteSerializer(favorite).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def delete(self, request, pk):
        deleted, _ = Favorite.objects.filter(
            user=request.user, recipe_id=pk
        ).delete()
        if not deleted:
            raise NotFound(MSG_FAVORITE_NOT_FOUND)
        return Response({"message": "Recipe removed from favorites"})


class UploadView(APIView):
    """POST addresses the recipe id, DELETE addresses the media id."""

    permission_classes = (IsAuthenticated,)
    parser_classes = (MultiPartParser, FormParser, JSONParser)

    def post(self, request, pk):
        recipe = get_recipe_or_404(pk)
        check_access(request.user, recipe, Action.EDIT)

        if UPLOAD_FIELD not in request.FILES:
            raise BadRequest(MSG_NO_FILE)

        serializer = MediaUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        upload = serializer.validated_data["file"]

        try:
            result = get_media_host().upload(upload, media_folder())
        except UploadError:
            raise MediaHostError()

        order = serializer.validated_data.get("order")
        if order is None:
            last = recipe.media.aggregate(last=Max("order"))["last"]
            order = 0 if last is None else last + 1

        media = Media.objects.create(
            recipe=recipe,
            url=result.url,
            type=(
                Media.Type.VIDEO
                if result.resource_type == "video"
                else Media.Type.IMAGE
            ),
            public_id=result.public_id,
            alt_text=serializer.validated_data.get("altText") or None,
            order=order,
            filename=upload.name,
            size=upload.size or 0,
            mime_type=getattr(upload, "content_type", "") or "",
        )
        logger.info("Media %s stored for recipe %s", media.id, recipe.id)
        return Response(
            {
                "message": "File uploaded successfully",
                "media": project_media(media),
            },
            status=status.HTTP_201_CREATED,
        )

    def delete(self, request, pk):
        media = Media.objects.select_related("recipe").filter(pk=pk).first()
        if media is None:
            raise NotFound(MSG_MEDIA_NOT_FOUND)
        check_access(request.user, media, Action.DELETE)

        if media.public_id:
            try:
                get_media_host().destroy(media.public_id)
            except UploadError:
                raise MediaHostError("Failed to delete media")
        else:
            logger.warning("Media %s has no storage handle", media.id)
        media.delete()
        return Response({"message": "Media deleted successfully"})


class SharePdfView(OptionalAuthForReadsMixin, APIView):
    permission_classes = (AllowAny,)

    def get(self, request, pk):
        recipe = get_recipe_or_404(pk)
        check_access(request.user, recipe, Action.READ)
        # TODO: render the projected recipe to PDF once a renderer is chosen.
        return Response(
            {
                "message": "PDF generation not yet implemented",
                "recipe": RecipeSerializer(
                    recipe,
                    context={"language": request_language(request)},
                ).data,
            }
        )


class ShareEmailView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, pk):
        serializer = EmailShareSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        recipe = get_recipe_or_404(pk)
        check_access(request.user, recipe, Action.READ)
        language = request_language(request)
        title = RecipeSerializer(
            recipe, context={"language": language}
        ).data["title"]
        return Response(
            {
                "message": "Email sharing not yet implemented",
                "shared": {
                    "recipeId": recipe.id,
                    "email": serializer.validated_data["email"],
                    "recipeTitle": title,
                },
            }
        )
