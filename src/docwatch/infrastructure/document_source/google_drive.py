"""Google Drive document source over the Drive v3 REST API."""

import logging

import httpx

from docwatch.application.dto.listing import ListedFile
from docwatch.domain.exceptions import ExtractionError
from docwatch.infrastructure.document_parsers import parse_file, supported_content_types
from docwatch.infrastructure.document_parsers.registry import DOCX_MIME_TYPE

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"

# Native Google Docs are exported as text; everything else goes through a parser.
SUPPORTED_MIME_TYPES = frozenset(supported_content_types()) | {GOOGLE_DOC_MIME_TYPE}

_PLACEHOLDER_LABELS = {
    "application/pdf": "PDF",
    DOCX_MIME_TYPE: "DOCX",
}

_LIST_FIELDS = "nextPageToken, files(id, name, mimeType, modifiedTime, md5Checksum)"


def placeholder_for(mime_type: str) -> str:
    label = _PLACEHOLDER_LABELS.get(mime_type, "Document")
    return f"[{label} content unavailable]"


class GoogleDriveSource:
    """Lists and extracts files under a Drive folder with a bearer token."""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://www.googleapis.com/drive/v3",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._access_token = access_token
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {access_token}"},
        )

    async def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def supports(self, mime_type: str) -> bool:
        return mime_type in SUPPORTED_MIME_TYPES

    async def list_files(self, folder_id: str) -> list[ListedFile]:
        """Every non-folder file under ``folder_id``, sub-folders flattened.

        HTTP errors propagate; a partial listing would look like deletions.
        """
        files: list[ListedFile] = []
        await self._list_into(folder_id, files)
        return files

    async def _list_into(self, folder_id: str, accumulator: list[ListedFile]) -> None:
        page_token: str | None = None
        while True:
            params = {
                "q": f"'{folder_id}' in parents and trashed=false",
                "spaces": "drive",
                "fields": _LIST_FIELDS,
                "pageSize": 1000,
            }
            if page_token:
                params["pageToken"] = page_token
            r = await self._client.get("/files", params=params)
            r.raise_for_status()
            data = r.json()

            for item in data.get("files", []):
                if item.get("mimeType") == FOLDER_MIME_TYPE:
                    logger.debug("Recursing into folder %s", item.get("name"))
                    await self._list_into(item["id"], accumulator)
                    continue
                accumulator.append(
                    ListedFile(
                        external_id=item["id"],
                        name=item.get("name", ""),
                        mime_type=item.get("mimeType", ""),
                        modified_time=item.get("modifiedTime", ""),
                        native_checksum=item.get("md5Checksum"),
                    )
                )

            page_token = data.get("nextPageToken")
            if not page_token:
                return

    async def extract_content(self, file: ListedFile) -> str:
        """Text of the file, or a bracketed placeholder when nothing could be parsed."""
        try:
            if file.mime_type == GOOGLE_DOC_MIME_TYPE:
                r = await self._client.get(
                    f"/files/{file.external_id}/export", params={"mimeType": "text/plain"}
                )
                r.raise_for_status()
                return r.text

            r = await self._client.get(f"/files/{file.external_id}", params={"alt": "media"})
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise ExtractionError(f"Could not fetch {file.name}: {e}") from e

        try:
            result = parse_file(r.content, content_type=file.mime_type, filename=file.name)
        except ValueError as e:
            logger.warning("Could not parse %s: %s", file.name, e)
            return placeholder_for(file.mime_type)
        except Exception as e:
            raise ExtractionError(f"Could not parse {file.name}: {e}") from e
        if result.is_empty:
            return placeholder_for(file.mime_type)
        return result.text

    async def aclose(self) -> None:
        await self._client.aclose()
