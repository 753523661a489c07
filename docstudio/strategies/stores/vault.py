"""Case.dev vault client and the document store built on it.

Vaults are remote object stores. Generated documents are kept as
``text/markdown`` objects whose metadata carries the document record.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any

import httpx

from docstudio.core.exceptions import (
    DocumentNotFoundError,
    InvalidApiKeyError,
    RateLimitError,
    StorageError,
    VaultApiError,
)
from docstudio.interfaces.document_store import (
    BaseDocumentStore,
    DocumentStatus,
    DocumentUpdate,
    GeneratedDocument,
    filter_documents,
)

logger = logging.getLogger(__name__)

MARKDOWN_CONTENT_TYPE = "text/markdown"


def _raise_for_status(response: httpx.Response, action: str, authenticated: bool = True) -> None:
    """Map a failed vault response to the matching exception.

    Auth and rate-limit statuses only carry meaning for calls made with the
    API key; failures from presigned object URLs are plain VaultApiErrors.
    """
    if response.is_success:
        return
    if authenticated and response.status_code == 401:
        raise InvalidApiKeyError()
    if authenticated and response.status_code == 429:
        raise RateLimitError()
    raise VaultApiError(
        f"{action} failed: {response.reason_phrase or response.status_code}",
        response.status_code,
        response.text,
    )


class VaultClient:
    """Thin async client for the Case.dev vault API.

    Attributes:
        base_url: API base URL without trailing slash.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.case.dev",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Bearer key for the API.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        json: dict | None = None,
        params: dict | None = None,
        authenticated: bool = True,
        url: str | None = None,
        content: bytes | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        request_headers = dict(headers or {})
        if authenticated:
            request_headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    url or f"{self.base_url}{path}",
                    json=json,
                    params=params,
                    content=content,
                    headers=request_headers,
                )
        except httpx.HTTPError as e:
            logger.warning(f"Vault request failed ({action}): {e}")
            raise StorageError(f"{action} failed: {e}") from e

        _raise_for_status(response, action, authenticated)
        return response

    # =========================================================================
    # Vaults
    # =========================================================================

    async def list_vaults(self) -> list[dict[str, Any]]:
        response = await self._request("GET", "/vault", "List vaults")
        return response.json().get("vaults", [])

    async def create_vault(self, name: str) -> dict[str, Any]:
        response = await self._request("POST", "/vault", "Create vault", json={"name": name})
        return response.json()

    async def get_vault(self, vault_id: str) -> dict[str, Any]:
        response = await self._request("GET", f"/vault/{vault_id}", "Get vault")
        return response.json()

    async def get_or_create_default_vault(self, today: date | None = None) -> str:
        """Return the newest vault's id, creating one when none exist."""
        vaults = await self.list_vaults()
        if vaults:
            newest = max(vaults, key=lambda v: v.get("createdAt") or "")
            logger.info(f"Using existing vault {newest['id']}")
            return newest["id"]

        name = f"Legal Documents - {(today or date.today()).isoformat()}"
        vault = await self.create_vault(name)
        logger.info(f"Created vault {vault['id']} ({name})")
        return vault["id"]

    async def validate_api_key(self) -> bool:
        """Whether the key is accepted.

        Raises:
            VaultApiError: For failures other than a rejected key.
        """
        try:
            await self.list_vaults()
        except InvalidApiKeyError:
            return False
        return True

    # =========================================================================
    # Objects
    # =========================================================================

    async def list_objects(self, vault_id: str) -> list[dict[str, Any]]:
        response = await self._request("GET", f"/vault/{vault_id}/objects", "List objects")
        return response.json().get("objects", [])

    async def get_object(self, vault_id: str, object_id: str) -> dict[str, Any]:
        response = await self._request("GET", f"/vault/{vault_id}/objects/{object_id}", "Get object")
        return response.json()

    async def download_object(self, vault_id: str, object_id: str) -> str:
        response = await self._request(
            "GET", f"/vault/{vault_id}/objects/{object_id}/download", "Download"
        )
        return response.text

    async def update_object(
        self, vault_id: str, object_id: str, updates: dict[str, Any]
    ) -> dict[str, Any]:
        """PATCH an object's ``filename``, ``metadata`` or ``relative_path``."""
        response = await self._request(
            "PATCH", f"/vault/{vault_id}/objects/{object_id}", "Update object", json=updates
        )
        return response.json()

    async def delete_object(self, vault_id: str, object_id: str, force: bool = False) -> None:
        params = {"force": "true"} if force else None
        await self._request(
            "DELETE", f"/vault/{vault_id}/objects/{object_id}", "Delete object", params=params
        )

    async def upload_document(
        self,
        vault_id: str,
        filename: str,
        content: str,
        mime_type: str = MARKDOWN_CONTENT_TYPE,
        metadata: dict[str, Any] | None = None,
        relative_path: str | None = None,
    ) -> dict[str, Any]:
        """Upload text as a new vault object.

        Requests a presigned URL, PUTs the bytes there, triggers ingestion,
        then attaches metadata and path when given.

        Returns:
            The stored object description.

        Raises:
            VaultApiError: If any step fails.
        """
        body = content.encode("utf-8")

        presign = await self._request(
            "POST",
            f"/vault/{vault_id}/upload",
            "Get upload URL",
            json={"filename": filename, "contentType": mime_type, "sizeBytes": len(body)},
        )
        presign_data = presign.json()
        upload_url = presign_data.get("url") or presign_data.get("presignedUrl") or presign_data.get("uploadUrl")
        object_id = presign_data.get("objectId") or presign_data.get("object_id") or presign_data.get("id")
        if not upload_url or not object_id:
            raise VaultApiError("Invalid presign response: missing URL or object ID", 500)

        await self._request(
            "PUT",
            "",
            "Upload",
            url=upload_url,
            content=body,
            headers={"Content-Type": mime_type},
            authenticated=False,
        )

        ingest = await self._request("POST", f"/vault/{vault_id}/ingest/{object_id}", "Ingestion")
        result = ingest.json() if ingest.content else {}
        vault_object = {**result, "id": result.get("id") or object_id}
        logger.info(f"Uploaded {filename} to vault {vault_id} as {vault_object['id']}")

        updates: dict[str, Any] = {}
        if metadata:
            updates["metadata"] = metadata
        if relative_path:
            updates["relative_path"] = relative_path
        if updates:
            return await self.update_object(vault_id, object_id, updates)
        return vault_object


def document_metadata(document: GeneratedDocument) -> dict[str, Any]:
    """Vault metadata describing a document."""
    return {
        "documentId": document.id,
        "templateId": document.template_id,
        "templateName": document.template_name,
        "documentName": document.name,
        "status": document.status,
        "variables": document.variables,
        "createdAt": document.created_at.isoformat(),
        "updatedAt": document.updated_at.isoformat(),
    }


def object_to_document(obj: dict[str, Any], content: str = "") -> GeneratedDocument:
    """Rebuild a document from a vault object and its content."""
    metadata = obj.get("metadata") or {}
    record: dict[str, Any] = {
        "id": metadata.get("documentId") or obj["id"],
        "template_id": metadata.get("templateId") or "",
        "template_name": metadata.get("templateName") or "",
        "name": metadata.get("documentName") or obj.get("filename", ""),
        "content": content,
        "variables": metadata.get("variables") or {},
        "status": metadata.get("status") or "draft",
    }
    created_at = metadata.get("createdAt") or obj.get("createdAt")
    if created_at:
        record["created_at"] = created_at
        record["updated_at"] = metadata.get("updatedAt") or created_at
    return GeneratedDocument.model_validate(record)


class VaultStore(BaseDocumentStore):
    """Document store backed by a Case.dev vault.

    The vault is resolved on first use: the configured id if any,
    otherwise the newest vault, otherwise a freshly created one.
    """

    def __init__(self, client: VaultClient, vault_id: str | None = None) -> None:
        self._client = client
        self._vault_id = vault_id

    async def vault_id(self) -> str:
        if self._vault_id is None:
            self._vault_id = await self._client.get_or_create_default_vault()
        return self._vault_id

    async def _document_objects(self) -> list[dict[str, Any]]:
        objects = await self._client.list_objects(await self.vault_id())
        return [obj for obj in objects if obj.get("contentType") == MARKDOWN_CONTENT_TYPE]

    async def _find_object(self, document_id: str) -> dict[str, Any]:
        for obj in await self._document_objects():
            if (obj.get("metadata") or {}).get("documentId") == document_id:
                return obj
        raise DocumentNotFoundError(document_id)

    async def save(self, document: GeneratedDocument) -> GeneratedDocument:
        filename = f"{document.template_name}_{int(time.time() * 1000)}.md"
        await self._client.upload_document(
            await self.vault_id(),
            filename=filename,
            content=document.content,
            metadata=document_metadata(document),
            relative_path=f"templates/{document.template_id}/",
        )
        logger.info(f"Saved document {document.id} to vault as {filename}")
        return document

    async def get(self, document_id: str) -> GeneratedDocument:
        obj = await self._find_object(document_id)
        content = await self._client.download_object(await self.vault_id(), obj["id"])
        return object_to_document(obj, content)

    async def list(
        self,
        template_id: str | None = None,
        status: DocumentStatus | None = None,
        limit: int | None = None,
    ) -> list[GeneratedDocument]:
        # Content is not downloaded for listings
        documents = [object_to_document(obj) for obj in await self._document_objects()]
        return filter_documents(documents, template_id=template_id, status=status, limit=limit)

    async def update(self, document_id: str, changes: DocumentUpdate) -> GeneratedDocument:
        vault_id = await self.vault_id()
        obj = await self._find_object(document_id)
        document = changes.apply(object_to_document(obj))
        metadata = {**(obj.get("metadata") or {}), **document_metadata(document)}

        if changes.content is not None:
            # Object content is immutable: upload a replacement, then drop the old one
            await self._client.upload_document(
                vault_id,
                filename=obj.get("filename") or f"{document.template_name}_{int(time.time() * 1000)}.md",
                content=changes.content,
                metadata=metadata,
                relative_path=obj.get("relative_path") or f"templates/{document.template_id}/",
            )
            await self._client.delete_object(vault_id, obj["id"], force=True)
        else:
            await self._client.update_object(vault_id, obj["id"], {"metadata": metadata})
            document = document.model_copy(
                update={"content": await self._client.download_object(vault_id, obj["id"])}
            )

        logger.info(f"Updated document {document_id} in vault {vault_id}")
        return document

    async def delete(self, document_id: str) -> None:
        vault_id = await self.vault_id()
        obj = await self._find_object(document_id)
        await self._client.delete_object(vault_id, obj["id"], force=True)
        logger.info(f"Deleted document {document_id} from vault {vault_id}")
