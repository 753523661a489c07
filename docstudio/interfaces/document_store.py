"""Abstract base class for document persistence strategies.

The Strategy Pattern allows generated documents to be kept in the remote
vault or on local disk without changing the callers.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from docstudio.engine.models import Values

DocumentStatus = Literal["draft", "final", "archived"]


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


class GeneratedDocument(BaseModel):
    """A document produced from a template and persisted by a store."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    template_id: str = ""
    template_name: str = ""
    name: str
    content: str = ""
    variables: Values = Field(default_factory=dict)
    format: str = "markdown"
    status: DocumentStatus = "draft"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC and convert aware ones to UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class DocumentUpdate(BaseModel):
    """Partial update applied by ``BaseDocumentStore.update``."""

    name: str | None = None
    content: str | None = None
    variables: Values | None = None
    status: DocumentStatus | None = None

    def apply(self, document: GeneratedDocument) -> GeneratedDocument:
        """Return a copy of the document with these changes and a fresh timestamp."""
        changes = self.model_dump(exclude_none=True)
        changes["updated_at"] = utcnow()
        return document.model_copy(update=changes)


class BaseDocumentStore(ABC):
    """Abstract base class for document stores.

    ``search`` and ``count`` are derived from ``list`` and need not be
    overridden.
    """

    @abstractmethod
    async def save(self, document: GeneratedDocument) -> GeneratedDocument:
        """Persist a new document.

        Returns:
            The stored document.

        Raises:
            StorageError: If the document cannot be written.
        """
        ...

    @abstractmethod
    async def get(self, document_id: str) -> GeneratedDocument:
        """Fetch a document with its content.

        Raises:
            DocumentNotFoundError: If no document has this id.
        """
        ...

    @abstractmethod
    async def list(
        self,
        template_id: str | None = None,
        status: DocumentStatus | None = None,
        limit: int | None = None,
    ) -> list[GeneratedDocument]:
        """List documents, most recently updated first.

        Args:
            template_id: Only documents generated from this template.
            status: Only documents with this status.
            limit: Maximum number of documents returned.
        """
        ...

    @abstractmethod
    async def update(self, document_id: str, changes: DocumentUpdate) -> GeneratedDocument:
        """Apply a partial update and refresh ``updated_at``.

        Raises:
            DocumentNotFoundError: If no document has this id.
        """
        ...

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: If no document has this id.
        """
        ...

    async def search(self, query: str) -> list[GeneratedDocument]:
        """Find documents whose name or template name contains the query."""
        if not query.strip():
            return await self.list()

        needle = query.lower()
        return [
            document
            for document in await self.list()
            if needle in document.name.lower() or needle in document.template_name.lower()
        ]

    async def count(self) -> int:
        """Number of stored documents."""
        return len(await self.list())


def filter_documents(
    documents: list[GeneratedDocument],
    template_id: str | None = None,
    status: DocumentStatus | None = None,
    limit: int | None = None,
) -> list[GeneratedDocument]:
    """Apply the shared list filters, newest first."""
    if template_id:
        documents = [d for d in documents if d.template_id == template_id]
    if status:
        documents = [d for d in documents if d.status == status]
    documents = sorted(documents, key=lambda d: d.updated_at, reverse=True)
    if limit:
        documents = documents[:limit]
    return documents
