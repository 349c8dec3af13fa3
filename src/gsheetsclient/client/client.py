"""Google Drive v3 / Sheets v4 REST facade."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence, Union

from gsheetsclient.auth import AuthInfo
from gsheetsclient.errors import NotFoundError, UploadInitError
from gsheetsclient.models import ClientConfig, FileLookup, UploadSession
from gsheetsclient.transport import AuthorizedTransport, Response, Transport
from gsheetsclient.util.mime import guess_content_type

from .urls import (
    URI_DRIVE_FILES,
    URI_DRIVE_UPLOAD,
    URI_SPREADSHEETS,
    Fields,
    add_all_drives,
    add_fields,
    append_params,
    append_query,
    list_projection,
    range_path,
)

logger = logging.getLogger(__name__)

USER_ENTERED: str = "USER_ENTERED"


class GoogleSheetsClient:
    """
    Drive and Sheets REST client.

    Every method is one HTTP exchange through the transport (uploads are two,
    list calls one per page). JSON bodies are returned as plain dicts.

    Notes:
        - File calls carry the configured field projection unless the caller
          passes fields, which then replace the default exactly.
        - `supports_all_drives` is applied to all file requests consistently.
        - No retries happen here; they belong to the transport.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._transport: Transport = AuthorizedTransport.from_auth_info(
            auth_info, scopes=scopes
        )

    @classmethod
    def from_transport(
        cls,
        transport: Transport,
        *,
        config: Optional[ClientConfig] = None,
    ) -> "GoogleSheetsClient":
        """Create a client around an existing transport (useful for tests)."""
        obj = cls.__new__(cls)
        obj._config = config or ClientConfig()
        obj._transport = transport
        return obj

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    def set_default_fields(self, fields: Sequence[str]) -> None:
        self._config = replace(self._config, default_fields=fields)

    def set_all_drives_support(self, value: bool) -> None:
        self._config = replace(self._config, supports_all_drives=bool(value))

    # ----------------------------
    # Drive files
    # ----------------------------
    def get_file(self, file_id: str, fields: Optional[Fields] = None) -> dict[str, Any]:
        uri = add_fields(f"{URI_DRIVE_FILES}/{file_id}", self._file_fields(fields))
        return self._decode(self._request(self._drive(uri)))

    def list_files(
        self,
        query: str = "",
        *,
        fields: Optional[Fields] = None,
    ) -> list[dict[str, Any]]:
        """
        Return every file matching the Drive search `query`, following pages.

        The query is appended verbatim as `q`; an empty query lists everything
        the credentials can see.
        """
        uri = URI_DRIVE_FILES
        if query:
            uri = append_query(uri, "q", query)
        uri = add_fields(uri, list_projection("files", self._file_fields(fields)))
        if self._config.supports_all_drives:
            uri = add_all_drives(uri, listing=True)
        return self._collect_pages(uri, "files")

    def create_file(
        self,
        pathname: str,
        title: str,
        extra_metadata: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Upload a local file as a new Drive file.

        `extra_metadata` is merged over `{"name": title}`; pass
        `{"mimeType": MIME_TYPE_SPREADSHEET}` to have a CSV converted into a
        native spreadsheet, or `{"parents": [folder_id]}` to place it.
        """
        content_type = guess_content_type(pathname)
        metadata = {"name": title, **(extra_metadata or {})}
        session = self.init_upload(metadata, content_type)
        return self.upload_content(session, pathname)

    def create_file_metadata(
        self,
        title: str,
        extra_metadata: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        uri = self._drive(add_fields(URI_DRIVE_FILES, self._config.default_fields))
        body = {"name": title, **(extra_metadata or {})}
        return self._decode(self._request(uri, "POST", options={"json": body}))

    def update_file(
        self,
        file_id: str,
        pathname: str,
        metadata_patch: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        content_type = guess_content_type(pathname)
        session = self.init_upload(dict(metadata_patch or {}), content_type, file_id=file_id)
        return self.upload_content(session, pathname)

    def update_file_metadata(
        self,
        file_id: str,
        body: Optional[Mapping[str, Any]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        PATCH file metadata.

        `query_params` is passed through (e.g. addParents/removeParents); a
        `fields` entry in it replaces the default projection.
        """
        params = dict(query_params or {})
        fields = self._file_fields(params.pop("fields", None))
        uri = add_fields(f"{URI_DRIVE_FILES}/{file_id}", fields)
        uri = self._drive(append_params(uri, params))
        return self._decode(
            self._request(uri, "PATCH", options={"json": dict(body or {})})
        )

    def delete_file(self, file_id: str) -> Response:
        return self._request(self._drive(f"{URI_DRIVE_FILES}/{file_id}"), "DELETE")

    def export_file(self, file_id: str, mime_type: str = "text/csv") -> Response:
        """Export a native Google document; the caller reads the raw body."""
        uri = append_params(f"{URI_DRIVE_FILES}/{file_id}/export", {"mimeType": mime_type})
        return self._request(uri)

    def generate_ids(self, count: int = 10) -> list[str]:
        uri = append_params(f"{URI_DRIVE_FILES}/generateIds", {"count": count})
        return list(self._decode(self._request(uri)).get("ids", []))

    def lookup_file(self, file_id: str, fields: Optional[Fields] = None) -> FileLookup:
        """
        Fetch a file, reporting a 404 as `not_found` instead of raising.

        Any other failure propagates unchanged.
        """
        try:
            data = self.get_file(file_id, fields)
        except NotFoundError:
            return FileLookup(file_id=file_id, status="not_found")
        return FileLookup(file_id=file_id, status="found", file=data)

    def file_exists(self, file_id: str) -> bool:
        return self.lookup_file(file_id).found

    # ----------------------------
    # Resumable upload
    # ----------------------------
    def init_upload(
        self,
        metadata: Mapping[str, Any],
        content_type: str,
        *,
        file_id: Optional[str] = None,
    ) -> UploadSession:
        """
        Open a resumable upload session.

        POSTs the metadata for a new file, or PATCHes it onto `file_id`.

        Raises:
            UploadInitError: if the response is not 200 or has no Location.
        """
        if file_id:
            uri = f"{URI_DRIVE_UPLOAD}/{file_id}?uploadType=resumable"
            method = "PATCH"
        else:
            uri = f"{URI_DRIVE_UPLOAD}?uploadType=resumable"
            method = "POST"
        uri = self._drive(add_fields(uri, self._config.default_fields))

        resp = self._request(
            uri,
            method,
            headers={
                "X-Upload-Content-Type": content_type,
                "Content-Type": "application/json; charset=UTF-8",
            },
            options={"json": dict(metadata)},
        )

        if resp.status_code != 200:
            raise UploadInitError(
                f"Failed to initialize upload. {resp.text}",
                details={"status_code": resp.status_code, "body": resp.text},
            )
        location = resp.headers.get("Location")
        if not location:
            raise UploadInitError(
                "Missing Location header in response",
                details={"status_code": resp.status_code, "body": resp.text},
            )

        logger.info("Opened upload session (%s) for %s", content_type, file_id or "new file")
        return UploadSession(url=location, content_type=content_type, file_id=file_id)

    def upload_content(self, session: UploadSession, pathname: str) -> dict[str, Any]:
        """Stream the file at `pathname` into an open upload session."""
        uri = self._drive(add_fields(session.url, self._config.default_fields))
        size = os.path.getsize(pathname)
        logger.debug(
            "Uploading %d bytes of %s to %s", size, pathname, session.file_id or "new file"
        )
        with open(pathname, "rb") as f:
            resp = self._request(
                uri,
                "PUT",
                headers={
                    "Content-Type": session.content_type,
                    "Content-Length": str(size),
                },
                options={"body": f},
            )
        return self._decode(resp)

    # ----------------------------
    # Revisions
    # ----------------------------
    def list_revisions(
        self,
        file_id: str,
        fields: Optional[Fields] = None,
    ) -> list[dict[str, Any]]:
        uri = add_fields(
            f"{URI_DRIVE_FILES}/{file_id}/revisions",
            list_projection("revisions", self._revision_fields(fields)),
        )
        return self._collect_pages(uri, "revisions")

    def get_revision(
        self,
        file_id: str,
        revision_id: str,
        fields: Optional[Fields] = None,
    ) -> dict[str, Any]:
        uri = add_fields(
            f"{URI_DRIVE_FILES}/{file_id}/revisions/{revision_id}",
            self._revision_fields(fields),
        )
        return self._decode(self._request(uri))

    def update_revision(
        self,
        file_id: str,
        revision_id: str,
        body: Mapping[str, Any],
        fields: Optional[Fields] = None,
    ) -> dict[str, Any]:
        uri = add_fields(
            f"{URI_DRIVE_FILES}/{file_id}/revisions/{revision_id}",
            self._revision_fields(fields),
        )
        return self._decode(self._request(uri, "PATCH", options={"json": dict(body)}))

    def delete_revision(self, file_id: str, revision_id: str) -> Response:
        return self._request(f"{URI_DRIVE_FILES}/{file_id}/revisions/{revision_id}", "DELETE")

    # ----------------------------
    # Spreadsheets
    # ----------------------------
    def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        return self._decode(self._request(f"{URI_SPREADSHEETS}/{spreadsheet_id}"))

    def get_spreadsheet_values(
        self,
        spreadsheet_id: str,
        range_: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        uri = f"{URI_SPREADSHEETS}/{spreadsheet_id}/values/{range_path(range_)}"
        return self._decode(self._request(append_params(uri, params or {})))

    def create_spreadsheet(
        self,
        properties: Mapping[str, Any],
        sheets: Sequence[Mapping[str, Any]],
        spreadsheet_id: Optional[str] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"properties": dict(properties), "sheets": list(sheets)}
        if spreadsheet_id is not None:
            body["spreadsheetId"] = spreadsheet_id
        return self._decode(self._request(URI_SPREADSHEETS, "POST", options={"json": body}))

    def add_sheet(self, spreadsheet_id: str, sheet: Mapping[str, Any]) -> dict[str, Any]:
        """`sheet` is an AddSheetRequest body, e.g. {"properties": {"title": "x"}}."""
        return self.batch_update_spreadsheet(
            spreadsheet_id, {"requests": [{"addSheet": dict(sheet)}]}
        )

    def update_sheet(self, spreadsheet_id: str, properties: Mapping[str, Any]) -> dict[str, Any]:
        """Rename a sheet; `properties` needs sheetId and title."""
        return self.batch_update_spreadsheet(
            spreadsheet_id,
            {
                "requests": [
                    {
                        "updateSheetProperties": {
                            "properties": dict(properties),
                            "fields": "title",
                        }
                    }
                ]
            },
        )

    def delete_sheet(self, spreadsheet_id: str, sheet_id: Union[int, str]) -> dict[str, Any]:
        return self.batch_update_spreadsheet(
            spreadsheet_id, {"requests": [{"deleteSheet": {"sheetId": sheet_id}}]}
        )

    def batch_update_spreadsheet(
        self,
        spreadsheet_id: str,
        body: Mapping[str, Any],
    ) -> dict[str, Any]:
        uri = f"{URI_SPREADSHEETS}/{spreadsheet_id}:batchUpdate"
        return self._decode(self._request(uri, "POST", options={"json": dict(body)}))

    def update_spreadsheet_values(
        self,
        spreadsheet_id: str,
        range_: str,
        values: Sequence[Sequence[Any]],
    ) -> dict[str, Any]:
        uri = append_query(
            f"{URI_SPREADSHEETS}/{spreadsheet_id}/values/{range_path(range_)}",
            "valueInputOption",
            USER_ENTERED,
        )
        body = {"values": [list(row) for row in values]}
        return self._decode(self._request(uri, "PUT", options={"json": body}))

    def append_spreadsheet_values(
        self,
        spreadsheet_id: str,
        range_: str,
        values: Sequence[Sequence[Any]],
    ) -> dict[str, Any]:
        """Append rows after the last row of the table found in `range_`."""
        uri = append_query(
            f"{URI_SPREADSHEETS}/{spreadsheet_id}/values/{range_path(range_)}:append",
            "valueInputOption",
            USER_ENTERED,
        )
        body = {
            "range": range_,
            "majorDimension": "ROWS",
            "values": [list(row) for row in values],
        }
        return self._decode(self._request(uri, "POST", options={"json": body}))

    def clear_spreadsheet_values(self, spreadsheet_id: str, range_: str) -> dict[str, Any]:
        uri = f"{URI_SPREADSHEETS}/{spreadsheet_id}/values/{range_path(range_)}:clear"
        return self._decode(self._request(uri, "POST"))

    # ----------------------------
    # Internals
    # ----------------------------
    def _file_fields(self, fields: Optional[Fields]) -> Fields:
        return fields if fields else self._config.default_fields

    def _revision_fields(self, fields: Optional[Fields]) -> Fields:
        return fields if fields else self._config.revision_fields

    def _drive(self, uri: str) -> str:
        if not self._config.supports_all_drives:
            return uri
        return add_all_drives(uri)

    def _collect_pages(self, uri: str, container: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            page_uri = uri
            if page_token is not None:
                page_uri = append_params(uri, {"pageToken": page_token})
            data = self._decode(self._request(page_uri))
            items.extend(data.get(container, []))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return items

    def _request(
        self,
        uri: str,
        method: str = "GET",
        *,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        return self._transport.request(uri, method, headers or {}, options or {})

    @staticmethod
    def _decode(resp: Response) -> dict[str, Any]:
        if not resp.content:
            return {}
        return resp.json()
