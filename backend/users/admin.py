from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.contrib.auth.forms import UserChangeForm as BaseChangeForm
from django.contrib.auth.forms import UserCreationForm as BaseCreationForm
from django.utils.html import format_html

from .models import User


class UserCreationForm(BaseCreationForm):
    class Meta(BaseCreationForm.Meta):
        model = User
        fields = ("email", "role")


class UserChangeForm(BaseChangeForm):
    class Meta(BaseChangeForm.Meta):
        model = User
        fields = "__all__"


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    form = UserChangeForm
    add_form = UserCreationForm
    list_display = (
        "id",
        "email",
        "name",
        "role",
        "language_pref",
        "is_active",
        "invite_status",
        "date_joined",
    )
    list_display_links = ("id", "email")
    list_filter = ("role", "language_pref", "is_active", "is_staff")
    search_fields = ("id", "email", "name")
    ordering = ("id",)
    autocomplete_fields = ("invited_by",)
    readonly_fields = ("invite_token", "invite_token_expires", "date_joined")

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("name", "role", "language_pref")}),
        (
            "Invitations",
            {"fields": ("invited_by", "invite_token", "invite_token_expires")},
        ),
        (
            "Permissions",
            {"fields": ("is_active", "is_staff", "is_superuser")},
        ),
        ("Dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "role", "password1", "password2"),
            },
        ),
    )

    @admin.display(description="Invite")
    def invite_status(self, obj: User):
        if obj.has_live_invite():
            return format_html(
                '<span title="{}">active until {}</span>',
                obj.invite_token,
                obj.invite_token_expires.strftime("%Y-%m-%d %H:%M"),
            )
        return "-"
