from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone

from users.constants import (
    EMAIL_MAX_LEN,
    INVITE_TOKEN_TTL,
    LANGUAGE_EN,
    LANGUAGE_ES,
    NAME_MAX_LEN,
    ROLE_ADMIN,
    ROLE_EDITOR,
    ROLE_VIEWER,
)
from users.tokens import generate_invite_token


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email must be set.")
        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", ROLE_ADMIN)
        return self._create_user(email, password, **extra_fields)

    def with_live_invite(self, token: str):
        return self.filter(
            invite_token=token,
            invite_token_expires__gt=timezone.now(),
        )


class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = ROLE_ADMIN, "Admin"
        EDITOR = ROLE_EDITOR, "Editor"
        VIEWER = ROLE_VIEWER, "Viewer"

    class Language(models.TextChoices):
        EN = LANGUAGE_EN, "English"
        ES = LANGUAGE_ES, "Español"

    username = None
    first_name = None
    last_name = None

    email = models.EmailField(
        "Email",
        max_length=EMAIL_MAX_LEN,
        unique=True,
        error_messages={"unique": "Email already registered"},
    )
    name = models.CharField("Name", max_length=NAME_MAX_LEN, blank=True)
    role = models.CharField(
        "Role",
        max_length=16,
        choices=Role.choices,
        default=Role.VIEWER,
    )
    language_pref = models.CharField(
        "Language",
        max_length=2,
        choices=Language.choices,
        default=Language.EN,
    )
    invite_token = models.CharField(
        "Invite token",
        max_length=64,
        blank=True,
        null=True,
        db_index=True,
    )
    invite_token_expires = models.DateTimeField(
        "Invite token expires",
        blank=True,
        null=True,
    )
    invited_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        related_name="invitees",
        blank=True,
        null=True,
        verbose_name="Invited by",
    )

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="user_email_ci_unique",
                violation_error_message="Email already registered",
            ),
        ]

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        return super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.email

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN

    @property
    def is_editor(self) -> bool:
        return self.role == self.Role.EDITOR

    def has_live_invite(self, now=None) -> bool:
        if not self.invite_token or not self.invite_token_expires:
            return False
        return self.invite_token_expires > (now or timezone.now())

    def issue_invite(self, now=None) -> str:
        """Replace any previous invite with a fresh token and save."""
        self.invite_token = generate_invite_token()
        self.invite_token_expires = (now or timezone.now()) + INVITE_TOKEN_TTL
        self.save(update_fields=["invite_token", "invite_token_expires"])
        return self.invite_token

    def clear_invite(self) -> None:
        self.invite_token = None
        self.invite_token_expires = None
        self.save(update_fields=["invite_token", "invite_token_expires"])
