from django.db.models import Q, QuerySet
from django_filters import rest_framework as filters

from api.localization import language_fields, request_language
from recipes.models import Recipe


class RecipeFilter(filters.FilterSet):
    search = filters.CharFilter(method="filter_search", label="Search")
    category = filters.CharFilter(
        field_name="categories__name",
        method="filter_membership",
        label="Category",
    )
    tag = filters.CharFilter(
        field_name="tags__name",
        method="filter_membership",
        label="Tag",
    )

    class Meta:
        model = Recipe
        fields = ("search", "category", "tag")

    def _language(self) -> str:
        request = getattr(self, "request", None)
        return request_language(request, self.data.get("language"))

    def filter_search(
            self,
            queryset: QuerySet,
            name: str,
            value: str
    ) -> QuerySet:
        needle = (value or "").strip()
        if not needle:
            return queryset
        fields = language_fields(self._language())
        return queryset.filter(
            Q(**{f"{fields['title']}__icontains": needle})
            | Q(**{f"{fields['instructions']}__icontains": needle})
        )

    def filter_membership(
            self,
            queryset: QuerySet,
            name: str,
            value: str
    ) -> QuerySet:
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(**{name: value}).distinct()
