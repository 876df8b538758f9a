"""
Adapters for the external media host.

Views never touch bytes after validation: they hand the uploaded file to
a host, persist the returned url/public id, and ask the host to destroy
the object again when the media record goes away.
"""

from __future__ import annotations

import logging
import posixpath
import uuid
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.files.storage import Storage, default_storage
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class UploadError(Exception):
    pass


@dataclass(frozen=True)
class UploadResult:
    url: str
    public_id: str
    resource_type: str


class MediaHost:
    def upload(self, file, folder: str) -> UploadResult:
        raise NotImplementedError

    def destroy(self, public_id: str) -> None:
        raise NotImplementedError


class StorageMediaHost(MediaHost):
    """Media host backed by a Django storage (filesystem, S3, ...)."""

    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or default_storage

    @staticmethod
    def resource_type(file) -> str:
        content_type = getattr(file, "content_type", "") or ""
        return "video" if content_type.startswith("video/") else "image"

    def upload(self, file, folder: str) -> UploadResult:
        ext = posixpath.splitext(getattr(file, "name", "") or "")[1].lower()
        name = posixpath.join(folder, f"{uuid.uuid4().hex}{ext}")
        try:
            saved = self.storage.save(name, file)
            url = self.storage.url(saved)
        except Exception as exc:
            logger.exception("Media upload to %s failed", name)
            raise UploadError(str(exc)) from exc
        return UploadResult(
            url=url,
            public_id=saved,
            resource_type=self.resource_type(file),
        )

    def destroy(self, public_id: str) -> None:
        try:
            self.storage.delete(public_id)
        except Exception as exc:
            logger.exception("Media delete of %s failed", public_id)
            raise UploadError(str(exc)) from exc


def get_media_host() -> MediaHost:
    return import_string(settings.MEDIA_HOST["BACKEND"])()


def media_folder() -> str:
    return settings.MEDIA_HOST.get("FOLDER", "family-recipes")
