from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import (
    AuthViewSet,
    CommentView,
    FavoriteDetailView,
    FavoriteListView,
    RecipeViewSet,
    ShareEmailView,
    SharePdfView,
    UploadView,
)

app_name = "api"


class OptionalSlashRouter(SimpleRouter):
    """Serves every route with or without a trailing slash."""

    def __init__(self):
        super().__init__()
        self.trailing_slash = "/?"


router = OptionalSlashRouter()
router.register("auth", AuthViewSet, basename="auth")
router.register("recipes", RecipeViewSet, basename="recipes")

urlpatterns = [
    path("", include(router.urls)),
    path("comments/<int:pk>", CommentView.as_view(), name="comments"),
    path("favorites", FavoriteListView.as_view(), name="favorites"),
    path(
        "favorites/<int:pk>",
        FavoriteDetailView.as_view(),
        name="favorite-detail",
    ),
    path("upload/<int:pk>", UploadView.as_view(), name="upload"),
    path("share/pdf/<int:pk>", SharePdfView.as_view(), name="share-pdf"),
    path(
        "share/email/<int:pk>",
        ShareEmailView.as_view(),
        name="share-email",
    ),
]
