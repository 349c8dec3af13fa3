"""Transport contract the client facade sends its requests through."""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Protocol


class Response(Protocol):
    """Subset of `requests.Response` the facade reads."""

    status_code: int
    headers: MutableMapping[str, str]

    @property
    def content(self) -> bytes: ...

    @property
    def text(self) -> str: ...

    def json(self, **kwargs: Any) -> Any: ...


class Transport(Protocol):
    """
    Sends one authorized HTTP request.

    `options` may carry:
        - json: JSON-encodable request body
        - body: raw bytes or a binary file object (streamed)
        - timeout: passed through to the HTTP layer

    Implementations must raise a GSheetsClientError subclass carrying
    `details["status_code"]` for non-2xx responses.
    """

    def request(
        self,
        uri: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Response: ...
