from __future__ import annotations

import posixpath
from typing import Any

from django.conf import settings
from PIL import Image, UnidentifiedImageError
from rest_framework import serializers

from api.constants import ALLOWED_IMAGE_EXTENSIONS, ALLOWED_VIDEO_EXTENSIONS


class MediaFileField(serializers.FileField):
    """Uploaded image or video, checked by extension, MIME type and size."""

    default_error_messages = {
        "invalid_type": "Invalid file type",
        "invalid_image": "Uploaded image is corrupted or unsupported.",
        "too_large": "File exceeds the {limit} byte limit.",
    }

    def _kind(self, data: Any) -> str:
        ext = posixpath.splitext(data.name or "")[1].lower().lstrip(".")
        content_type = (getattr(data, "content_type", "") or "").lower()
        if ext in ALLOWED_IMAGE_EXTENSIONS and content_type.startswith(
            "image/"
        ):
            return "image"
        if ext in ALLOWED_VIDEO_EXTENSIONS and content_type.startswith(
            "video/"
        ):
            return "video"
        self.fail("invalid_type")

    def to_internal_value(self, data: Any):
        data = super().to_internal_value(data)

        limit = settings.MAX_UPLOAD_SIZE
        if data.size is not None and data.size > limit:
            self.fail("too_large", limit=limit)

        if self._kind(data) == "image":
            try:
                with Image.open(data) as img:
                    img.verify()
            except (UnidentifiedImageError, OSError):
                self.fail("invalid_image")
            finally:
                data.seek(0)
        return data
