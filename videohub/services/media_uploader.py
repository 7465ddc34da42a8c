"""Upload staged files to the media host and hand back their public URLs."""

import hashlib
import logging
import time
from pathlib import Path
from typing import Protocol

import requests
from fastapi import Request

from videohub.core import config

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = 'https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload'


class MediaUploader(Protocol):
    def upload(self, local_path: str | Path | None) -> str | None:
        ...


class CloudinaryUploader:
    """Signed uploads to the Cloudinary REST API.

    ``upload`` returns the hosted URL, or None when anything goes wrong. The
    local file is removed after every attempt.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 60,
        session: requests.Session | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'CloudinaryUploader':
        return cls(
            cloud_name=config.CLOUDINARY_CLOUD_NAME,
            api_key=config.CLOUDINARY_API_KEY,
            api_secret=config.CLOUDINARY_API_SECRET,
            timeout=config.CLOUDINARY_UPLOAD_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: dict) -> str:
        to_sign = '&'.join(f'{key}={params[key]}' for key in sorted(params))
        return hashlib.sha1(f'{to_sign}{self.api_secret}'.encode('utf-8')).hexdigest()

    def upload(self, local_path: str | Path | None) -> str | None:
        if not local_path:
            return None

        path = Path(local_path)
        try:
            if not self.is_configured:
                logger.error('Cloudinary credentials are not configured; skipping upload of %s', path.name)
                return None

            params = {'timestamp': int(time.time())}
            form = {**params, 'api_key': self.api_key, 'signature': self.sign(params)}
            with path.open('rb') as file_handle:
                response = self.session.post(
                    CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name),
                    data=form,
                    files={'file': (path.name, file_handle)},
                    timeout=self.timeout,
                )
            response.raise_for_status()
            payload = response.json()
            url = payload.get('secure_url') or payload.get('url')
            if url:
                logger.info('Uploaded %s to %s', path.name, url)
            return url or None
        except (OSError, ValueError, requests.RequestException):
            logger.exception('Media upload failed for %s', path.name)
            return None
        finally:
            path.unlink(missing_ok=True)


def get_media_uploader(request: Request) -> MediaUploader:
    return request.app.state.media_uploader
