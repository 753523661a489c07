"""Document store keeping one JSON file per document on local disk."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import ValidationError

from docstudio.core.exceptions import DocumentNotFoundError, StorageError
from docstudio.interfaces.document_store import (
    BaseDocumentStore,
    DocumentStatus,
    DocumentUpdate,
    GeneratedDocument,
    filter_documents,
)

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class LocalStore(BaseDocumentStore):
    """Stores documents as ``<id>.json`` files in a directory.

    Attributes:
        directory: Folder holding the records.
    """

    def __init__(self, directory: Path | str) -> None:
        """Initialize the store, creating the directory if needed.

        Args:
            directory: Folder holding the records.
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, document_id: str) -> Path:
        if not _SAFE_ID_RE.match(document_id):
            raise DocumentNotFoundError(document_id)
        return self.directory / f"{document_id}.json"

    def _write(self, document: GeneratedDocument) -> None:
        path = self._path(document.id)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.error(f"Failed to write document {document.id}: {e}")
            raise StorageError(f"Failed to write document {document.id}: {e}") from e

    def _read(self, path: Path) -> GeneratedDocument:
        return GeneratedDocument.model_validate_json(path.read_text(encoding="utf-8"))

    async def save(self, document: GeneratedDocument) -> GeneratedDocument:
        self._write(document)
        logger.info(f"Saved document {document.id} ({document.name})")
        return document

    async def get(self, document_id: str) -> GeneratedDocument:
        path = self._path(document_id)
        if not path.exists():
            raise DocumentNotFoundError(document_id)
        try:
            return self._read(path)
        except (OSError, ValidationError) as e:
            logger.error(f"Failed to read document {document_id}: {e}")
            raise StorageError(f"Failed to read document {document_id}: {e}") from e

    async def list(
        self,
        template_id: str | None = None,
        status: DocumentStatus | None = None,
        limit: int | None = None,
    ) -> list[GeneratedDocument]:
        documents: list[GeneratedDocument] = []
        for path in self.directory.glob("*.json"):
            try:
                documents.append(self._read(path))
            except (OSError, ValidationError) as e:
                logger.warning(f"Skipping unreadable document file {path.name}: {e}")
        return filter_documents(documents, template_id=template_id, status=status, limit=limit)

    async def update(self, document_id: str, changes: DocumentUpdate) -> GeneratedDocument:
        document = changes.apply(await self.get(document_id))
        self._write(document)
        logger.info(f"Updated document {document_id}")
        return document

    async def delete(self, document_id: str) -> None:
        path = self._path(document_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise DocumentNotFoundError(document_id) from e
        logger.info(f"Deleted document {document_id}")
