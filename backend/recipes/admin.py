from django.conf import settings
from django.contrib import admin
from django.db.models import Count
from django.urls import reverse
from django.utils.html import format_html, format_html_join
from django.utils.http import urlencode
from rangefilter.filters import DateRangeFilter

from .models import Category, Comment, Favorite, Media, Recipe, Tag

admin.site.site_header = "Family Recipes administration"
admin.site.site_title = "Family Recipes"
admin.site.index_title = "Dashboard"
admin.site.site_url = getattr(settings, "FRONTEND_URL", "/")


def _changelist_url(model, **params):
    opts = model._meta
    base = reverse(f"admin:{opts.app_label}_{opts.model_name}_changelist")
    return f"{base}?{urlencode(params)}" if params else base


class MediaInline(admin.TabularInline):
    model = Media
    extra = 0
    fields = ("order", "type", "url", "alt_text", "filename", "size")
    readonly_fields = ("url", "filename", "size")
    ordering = ("order", "id")


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ("author", "text", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("author",)


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "recipes_link")
    search_fields = ("name",)
    ordering = ("name",)

    @admin.display(description="Recipes")
    def recipes_link(self, obj: Tag):
        url = _changelist_url(Recipe, tags__id__exact=obj.id)
        return format_html('<a href="{}">{}</a>', url, obj.recipes.count())


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "recipes_link")
    search_fields = ("name",)
    ordering = ("name",)

    @admin.display(description="Recipes")
    def recipes_link(self, obj: Category):
        url = _changelist_url(Recipe, categories__id__exact=obj.id)
        return format_html('<a href="{}">{}</a>', url, obj.recipes.count())


class TranslationFilter(admin.SimpleListFilter):
    title = "Spanish translation"
    parameter_name = "translated"

    def lookups(self, request, model_admin):
        return (("yes", "Translated"), ("no", "English only"))

    def queryset(self, request, queryset):
        if self.value() == "yes":
            return queryset.exclude(title_es__isnull=True).exclude(
                title_es=""
            )
        if self.value() == "no":
            return queryset.filter(title_es__isnull=True) | queryset.filter(
                title_es=""
            )
        return queryset


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title_en",
        "tags_list",
        "author_link",
        "is_public",
        "comments_cnt",
        "favorites_link",
        "created_at",
    )
    list_display_links = ("id", "title_en")
    list_editable = ("is_public",)
    search_fields = ("title_en", "title_es", "author__email")
    list_filter = (
        "is_public",
        "tags",
        "categories",
        TranslationFilter,
        ("created_at", DateRangeFilter),
    )
    inlines = (MediaInline, CommentInline)
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)
    filter_horizontal = ("tags", "categories")
    autocomplete_fields = ("author",)

    def get_queryset(self, request):
        return (
            super()
            .get_queryset(request)
            .select_related("author")
            .prefetch_related("tags")
            .annotate(
                comments_total=Count("comments", distinct=True),
                favorites_total=Count("favorites", distinct=True),
            )
        )

    @admin.display(description="Tags")
    def tags_list(self, obj: Recipe):
        tags = list(obj.tags.all())
        if not tags:
            return "-"
        return format_html_join(
            " ",
            '<a href="{}">{}</a>',
            (
                (_changelist_url(Recipe, tags__id__exact=tag.id), tag.name)
                for tag in tags
            ),
        )

    @admin.display(description="Author", ordering="author__email")
    def author_link(self, obj: Recipe):
        url = _changelist_url(Recipe, author__id__exact=obj.author_id)
        return format_html('<a href="{}">{}</a>', url, obj.author)

    @admin.display(description="Comments", ordering="comments_total")
    def comments_cnt(self, obj: Recipe):
        return obj.comments_total

    @admin.display(description="Favorites", ordering="favorites_total")
    def favorites_link(self, obj: Recipe):
        url = _changelist_url(Favorite, recipe__id__exact=obj.id)
        return format_html(
            '<a href="{}">{}</a>', url, obj.favorites_total
        )


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "recipe", "author", "short_text", "created_at")
    search_fields = ("text", "author__email", "recipe__title_en")
    list_filter = (("created_at", DateRangeFilter),)
    autocomplete_fields = ("recipe", "author")

    @admin.display(description="Text")
    def short_text(self, obj: Comment):
        return obj.text if len(obj.text) <= 60 else f"{obj.text[:57]}..."


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "recipe", "created_at")
    search_fields = ("user__email", "recipe__title_en")
    list_filter = ("user",)


@admin.register(Media)
class MediaAdmin(admin.ModelAdmin):
    list_display = ("id", "recipe", "type", "order", "filename", "size")
    search_fields = ("filename", "public_id", "recipe__title_en")
    list_filter = ("type", ("created_at", DateRangeFilter))
    autocomplete_fields = ("recipe",)
