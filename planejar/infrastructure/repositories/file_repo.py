"""Project files in object storage (phase documents and contracts).

Object names are <prefix>/<project_id>/.../<ms-timestamp>-<clean name>
so repeated uploads of the same file never collide. Uploads return the
public URL of the stored object.
"""

from __future__ import annotations

import logging

from planejar.application.interfaces.providers import IObjectStorage
from planejar.core.constants import STORAGE_PREFIX_CONTRACTS, STORAGE_PREFIX_PROJECTS
from planejar.domain.exceptions import ProviderError
from planejar.shared.utils.datetime import timestamp_ms
from planejar.shared.utils.filenames import clean_file_name

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def phase_document_path(project_id: str, phase_id: int, file_name: str, ms: int) -> str:
    return f"{STORAGE_PREFIX_PROJECTS}/{project_id}/phase{phase_id}/{ms}-{clean_file_name(file_name)}"


def contract_path(project_id: str, file_name: str, ms: int) -> str:
    return f"{STORAGE_PREFIX_CONTRACTS}/{project_id}/{ms}-{clean_file_name(file_name)}"


class FileRepository:
    """Uploads and removals in the project files bucket."""

    def __init__(self, storage: IObjectStorage, bucket: str, cache_control: str = "3600") -> None:
        self._storage = storage
        self._bucket = bucket
        self._cache_control = cache_control

    async def _upload(self, path: str, content: bytes, content_type: str) -> str | None:
        try:
            await self._storage.upload(
                self._bucket,
                path,
                content,
                content_type,
                upsert=False,
                cache_control=self._cache_control,
            )
        except ProviderError as exc:
            logger.error("Error uploading %s: %s", path, exc.diagnostics())
            return None
        return self._storage.get_public_url(self._bucket, path)

    async def upload_project_document(
        self,
        project_id: str,
        phase_id: int,
        file_name: str,
        content: bytes,
        content_type: str = PDF_CONTENT_TYPE,
    ) -> str | None:
        """Store a phase document; return its public URL or None on failure."""
        path = phase_document_path(project_id, phase_id, file_name, timestamp_ms())
        return await self._upload(path, content, content_type)

    async def upload_project_contract(
        self,
        project_id: str,
        file_name: str,
        content: bytes,
        content_type: str = PDF_CONTENT_TYPE,
    ) -> str | None:
        """Store a contract (PDF only); return its public URL or None."""
        if "pdf" not in content_type.lower():
            logger.warning("Rejected contract upload %r: only PDF files are allowed", file_name)
            return None
        path = contract_path(project_id, file_name, timestamp_ms())
        return await self._upload(path, content, content_type)

    async def _remove(self, path: str) -> bool:
        try:
            await self._storage.remove(self._bucket, [path])
            return True
        except ProviderError as exc:
            logger.error("Error deleting %s: %s", path, exc.diagnostics())
            return False

    async def delete_project_document(self, file_path: str) -> bool:
        return await self._remove(file_path)

    async def delete_project_contract(self, file_path: str) -> bool:
        return await self._remove(file_path)
