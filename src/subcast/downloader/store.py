"""Object store collaborators.

The pipeline only needs four primitives: upload a local file, have the store
fetch a remote URL itself, upload from an open byte stream, delete an asset.
CloudinaryStore is the production implementation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Protocol

from subcast.core.config import CloudinaryConfig
from subcast.core.errors import ConfigError, StoreError
from subcast.core.models import StoredAsset


class ObjectStore(Protocol):
    def upload_local_file(self, path: Path, **options: Any) -> StoredAsset: ...

    def fetch_remote_url(self, url: str, **options: Any) -> StoredAsset: ...

    def upload_stream(self, stream: BinaryIO, **options: Any) -> StoredAsset: ...

    def delete_asset(self, public_id: str) -> None: ...


class CloudinaryStore:
    """ObjectStore backed by the Cloudinary upload API."""

    def __init__(self, config: CloudinaryConfig):
        try:
            import cloudinary
            import cloudinary.uploader
        except ImportError:
            raise ImportError("cloudinary is not installed. Install with: pip install cloudinary")

        missing = [
            name
            for name, value in (
                ("cloud_name", config.cloud_name),
                ("api_key", config.api_key),
                ("api_secret", config.api_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing Cloudinary settings: {', '.join(missing)}")

        cloudinary.config(
            cloud_name=config.cloud_name,
            api_key=config.api_key,
            api_secret=config.api_secret,
            secure=True,
        )
        self._uploader = cloudinary.uploader
        self.defaults = {"resource_type": config.resource_type, "folder": config.folder}

    def _upload(self, target: Any, options: dict[str, Any]) -> StoredAsset:
        try:
            result = self._uploader.upload(target, **{**self.defaults, **options})
        except Exception as e:
            raise StoreError(str(e) or e.__class__.__name__) from e
        if not result or not result.get("secure_url"):
            raise StoreError("Cloudinary returned no secure_url")
        return StoredAsset(secure_url=result["secure_url"], public_id=result.get("public_id"))

    def upload_local_file(self, path: Path, **options: Any) -> StoredAsset:
        path = Path(path)
        if not path.is_file():
            raise StoreError(f"Local file does not exist: {path}")
        return self._upload(str(path), options)

    def fetch_remote_url(self, url: str, **options: Any) -> StoredAsset:
        # Cloudinary pulls the URL server-side when given a remote address
        return self._upload(url, options)

    def upload_stream(self, stream: BinaryIO, **options: Any) -> StoredAsset:
        return self._upload(stream, options)

    def delete_asset(self, public_id: str) -> None:
        try:
            self._uploader.destroy(public_id, resource_type=self.defaults["resource_type"])
        except Exception as e:
            raise StoreError(str(e) or e.__class__.__name__) from e
