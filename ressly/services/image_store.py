"""Image storage client on top of Apache Libcloud object storage."""
from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fastapi import Request
from libcloud.common.exceptions import BaseHTTPError
from libcloud.common.types import LibcloudError
from libcloud.storage.providers import get_driver
from libcloud.storage.types import ContainerDoesNotExistError, ObjectDoesNotExistError, Provider
from loguru import logger

from ressly.core.config import Settings
from ressly.core.errors import UploadError

PROVIDERS = {
    'local': Provider.LOCAL,
    's3': Provider.S3,
    'minio': Provider.S3,
    'gcs': Provider.GOOGLE_STORAGE,
    'azure': Provider.AZURE_BLOBS,
}

_STORE_ERRORS = (LibcloudError, BaseHTTPError, OSError)


class ImageFolder(str, Enum):
    RESIDENTS = 'residents'
    PETS = 'pets'
    REPORTS = 'reports'


@dataclass(frozen=True)
class StoredImage:
    url: str
    object_name: str


class ImageStore:
    """Uploads blobs into one container, keyed by ``<root>/<folder>/<uuid><ext>``.

    Uploads are not transactional: once ``upload`` returns, the object exists
    until ``delete`` is called for it.
    """

    def __init__(self, driver, container, root: str = '', public_base_url: Optional[str] = None) -> None:
        self.driver = driver
        self.container = container
        self.root = root.strip('/')
        self.public_base_url = public_base_url.rstrip('/') if public_base_url else None

    def object_name_for(self, folder: ImageFolder, filename: Optional[str] = None,
                        content_type: Optional[str] = None) -> str:
        suffix = Path(filename).suffix.lower() if filename else ''
        if not suffix and content_type:
            suffix = mimetypes.guess_extension(content_type) or ''
        name = f"{folder.value}/{uuid4().hex}{suffix}"
        return f"{self.root}/{name}" if self.root else name

    def upload(self, data: bytes, folder: ImageFolder, filename: Optional[str] = None,
               content_type: Optional[str] = None) -> StoredImage:
        if not data:
            raise UploadError('Image is empty')
        object_name = self.object_name_for(folder, filename, content_type)
        extra = {'content_type': content_type} if content_type else None
        try:
            obj = self.driver.upload_object_via_stream(
                iterator=iter([data]),
                container=self.container,
                object_name=object_name,
                extra=extra,
            )
        except _STORE_ERRORS as exc:
            logger.warning("upload of {} failed: {}", object_name, exc)
            raise UploadError(f"Could not store image {filename or object_name}") from exc
        logger.debug("stored {} ({} bytes)", object_name, len(data))
        return StoredImage(url=self._url_for(obj), object_name=object_name)

    def delete(self, object_name: str) -> bool:
        """Remove a stored object; failures are logged and reported as ``False``."""
        try:
            obj = self.driver.get_object(self.container.name, object_name)
            self.driver.delete_object(obj)
        except ObjectDoesNotExistError:
            logger.info("object {} already gone", object_name)
            return False
        except _STORE_ERRORS as exc:
            logger.error("failed to delete {}: {}", object_name, exc)
            return False
        logger.info("deleted {}", object_name)
        return True

    def close(self) -> None:
        connection = getattr(self.driver, 'connection', None)
        if connection is not None and hasattr(connection, 'close'):
            connection.close()

    def _url_for(self, obj) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{obj.name}"
        return obj.get_cdn_url()


def _driver_kwargs(config: Settings, provider_name: str) -> dict:
    if provider_name == 'local':
        base_path = Path(config.IMAGE_STORE_KEY or './media').expanduser().resolve()
        base_path.mkdir(parents=True, exist_ok=True)
        return {'key': str(base_path)}
    if not config.IMAGE_STORE_KEY or not config.IMAGE_STORE_SECRET:
        raise ValueError("IMAGE_STORE_KEY and IMAGE_STORE_SECRET are required for remote providers")
    kwargs = {'key': config.IMAGE_STORE_KEY, 'secret': config.IMAGE_STORE_SECRET}
    if provider_name == 's3':
        kwargs['region'] = config.IMAGE_STORE_REGION
    return kwargs


def build_image_store(config: Settings) -> ImageStore:
    provider_name = config.IMAGE_STORE_PROVIDER.strip().lower()
    if provider_name not in PROVIDERS:
        raise ValueError(f"Unsupported image store provider: {config.IMAGE_STORE_PROVIDER}")
    driver = get_driver(PROVIDERS[provider_name])(**_driver_kwargs(config, provider_name))
    try:
        container = driver.get_container(container_name=config.IMAGE_STORE_CONTAINER)
    except ContainerDoesNotExistError:
        logger.info("creating image container {}", config.IMAGE_STORE_CONTAINER)
        container = driver.create_container(container_name=config.IMAGE_STORE_CONTAINER)
    logger.info("image store ready: provider={} container={}", provider_name, container.name)
    return ImageStore(
        driver,
        container,
        root=config.IMAGE_STORE_ROOT,
        public_base_url=config.IMAGE_STORE_PUBLIC_BASE_URL,
    )


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store
