"""
CV Blob Storage Service
PDF and LaTeX CV artifacts in Google Cloud Storage, keyed by user ID
"""
import asyncio
from typing import List, Optional

import httpx
from google.api_core.exceptions import NotFound
from google.cloud import storage

from core.config import Settings
from core.exceptions import StorageException
from core.logging_config import logger


PDF_CONTENT_TYPE = "application/pdf"
LATEX_CONTENT_TYPE = "text/x-tex"


def cv_prefix(user_id: str) -> str:
    return f"cv/{user_id}/"


def cv_pdf_key(user_id: str) -> str:
    """Object key of a user's CV PDF"""
    return f"{cv_prefix(user_id)}cv.pdf"


def cv_latex_key(user_id: str) -> str:
    """Object key of a user's CV LaTeX source"""
    return f"{cv_prefix(user_id)}cv.tex"


class GCSCVStorageService:
    """
    CV storage on a GCS bucket

    Uploads always target the fixed per-user key, so a new upload replaces
    the previous object. The google-cloud-storage client is synchronous;
    its calls run in worker threads.
    """

    def __init__(self, settings: Settings, bucket: Optional[storage.Bucket] = None):
        self.bucket_name = settings.GCS_BUCKET_NAME
        self._bucket = bucket

    @property
    def bucket(self) -> storage.Bucket:
        if self._bucket is None:
            self._bucket = storage.Client().bucket(self.bucket_name)
        return self._bucket

    async def upload_cv_pdf(self, user_id: str, data: bytes) -> str:
        """Store the CV PDF and return its public URL"""
        return await self._upload(cv_pdf_key(user_id), data, PDF_CONTENT_TYPE)

    async def upload_cv_latex(self, user_id: str, latex_content: str) -> str:
        """Store the CV LaTeX source and return its public URL"""
        return await self._upload(cv_latex_key(user_id), latex_content, LATEX_CONTENT_TYPE)

    async def delete_cv_latex(self, user_id: str) -> bool:
        """Delete the stored LaTeX source; False when there was none"""
        key = cv_latex_key(user_id)
        try:
            await asyncio.to_thread(self.bucket.blob(key).delete)
        except NotFound:
            return False
        except Exception as e:
            logger.error(f"Failed to delete {key}: {e}")
            raise StorageException(f"Failed to delete {key}: {e}", failed_keys=[key])

        logger.info(f"Deleted {key}")
        return True

    async def delete_cv_files(self, user_id: str) -> List[str]:
        """
        Delete every object under the user's CV prefix

        Deletions run concurrently and all of them settle before this
        returns. Objects that were deleted stay deleted even if others fail.

        Returns:
            Keys that were deleted

        Raises:
            StorageException: Listing failed, or one or more deletions failed
                (`failed_keys` names them)
        """
        prefix = cv_prefix(user_id)
        try:
            blobs = await asyncio.to_thread(lambda: list(self.bucket.list_blobs(prefix=prefix)))
        except Exception as e:
            logger.error(f"Failed to list CV files under {prefix}: {e}")
            raise StorageException(f"Failed to list CV files: {e}")

        results = await asyncio.gather(
            *(asyncio.to_thread(blob.delete) for blob in blobs),
            return_exceptions=True
        )

        deleted, failed = [], []
        for blob, result in zip(blobs, results):
            if isinstance(result, Exception):
                logger.error(f"Failed to delete {blob.name}: {result}")
                failed.append(blob.name)
            else:
                deleted.append(blob.name)

        if failed:
            raise StorageException(
                f"Failed to delete {len(failed)} of {len(blobs)} CV files: {', '.join(failed)}",
                failed_keys=failed,
            )

        logger.info(f"Deleted {len(deleted)} CV files for user {user_id}")
        return deleted

    async def download_from_blob(self, url: str) -> bytes:
        """Fetch a stored object by its public URL"""
        response = await self._get(url)
        if not response.is_success:
            raise StorageException(f"Failed to download from blob: {response.reason_phrase}")
        return response.content

    async def download_latex_content(self, url: str) -> str:
        """Fetch stored LaTeX source as text"""
        response = await self._get(url)
        if not response.is_success:
            raise StorageException(f"Failed to download LaTeX: {response.reason_phrase}")
        return response.text

    async def _upload(self, key: str, data, content_type: str) -> str:
        blob = self.bucket.blob(key)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except Exception as e:
            logger.error(f"Failed to upload {key}: {e}")
            raise StorageException(f"Failed to upload {key}: {e}")

        logger.info(f"Uploaded {key} to bucket {self.bucket_name}")
        return blob.public_url

    @staticmethod
    async def _get(url: str) -> httpx.Response:
        try:
            async with httpx.AsyncClient() as client:
                return await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Blob download failed for {url}: {e}")
            raise StorageException(f"Failed to download from blob: {e}")
