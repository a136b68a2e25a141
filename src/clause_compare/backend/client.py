"""HTTP client for the external document-comparison backend."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..config.models import RelaySettings
from ..models.comparison import ComparisonResponse
from ..models.upload import ParsedUpload
from ..parsers.exceptions import (
    BackendUnavailableError,
    ComparisonRequestError,
    ResponseFormatError,
)
from ..parsers.response_parser import ComparisonResponseParser

logger = logging.getLogger(__name__)


@dataclass
class UpstreamResponse:
    """Status code and decoded body of a backend response."""
    status_code: int
    data: Any
    is_json: bool = True

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def decode_body(text: str) -> tuple[Any, bool]:
    """
    Decode a response body as JSON.

    ``NaN`` and ``Infinity`` are not JSON and cannot be re-serialized, so
    bodies containing them are treated as raw text.

    Returns:
        ``(data, True)`` for JSON bodies, ``({"raw": text}, False)`` otherwise.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant), True
    except ValueError:
        return {"raw": text}, False


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


class BackendClient:
    """
    Async client for the comparison backend's compare endpoint.

    A single ``httpx.AsyncClient`` is reused for connection pooling. Both
    relay paths send the same multipart shape: one ``baselineFile`` part
    and up to two ``compareFiles`` parts. The multipart boundary and
    Content-Type header are left to httpx.
    """

    def __init__(
        self,
        settings: RelaySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the backend client.

        Args:
            settings: Relay settings holding backend URLs and timeouts.
            transport: Optional transport override, e.g. ``httpx.MockTransport``.
        """
        self.settings = settings
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout, connect=settings.connect_timeout),
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            transport=transport,
        )

    async def forward_upload(self, upload: ParsedUpload) -> UpstreamResponse:
        """
        Forward an upload to the proxy endpoint and return its response as-is.

        Raises:
            BackendUnavailableError: If the backend cannot be reached.
        """
        url = self.settings.proxy_endpoint
        response = await self._post(url, upload)
        data, is_json = decode_body(response.text)
        if not is_json:
            logger.warning(f"Backend returned a non-JSON body (status {response.status_code})")
        return UpstreamResponse(status_code=response.status_code, data=data, is_json=is_json)

    async def compare_documents(self, upload: ParsedUpload, token: str) -> ComparisonResponse:
        """
        Run a comparison on behalf of a signed-in viewer.

        Args:
            upload: Documents to compare.
            token: Bearer token passed through to the backend.

        Returns:
            The parsed ComparisonResponse.

        Raises:
            BackendUnavailableError: If the backend cannot be reached.
            ComparisonRequestError: If the backend rejects the request or
                answers with something other than a comparison object.
        """
        url = self.settings.viewer_endpoint
        response = await self._post(
            url,
            upload,
            headers={"Authorization": f"Bearer {token}"},
        )
        data, is_json = decode_body(response.text)

        if not response.is_success:
            message = None
            if is_json and isinstance(data, dict) and data.get("error"):
                message = str(data["error"])
            raise ComparisonRequestError(
                message or f"Comparison failed ({response.status_code})",
                status_code=response.status_code,
            )

        if not is_json:
            raise ComparisonRequestError(
                "The comparison service returned an unreadable response.",
                status_code=response.status_code,
            )

        try:
            return ComparisonResponseParser.parse(data)
        except ResponseFormatError as e:
            raise ComparisonRequestError(
                "The comparison service returned an unexpected response.",
                details=e.to_dict(),
                status_code=response.status_code,
            ) from e

    async def _post(
        self,
        url: str,
        upload: ParsedUpload,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        files = upload.to_multipart(max_compares=self.settings.max_compare_files)
        logger.info(f"POST {url} with {len(files)} file(s)")
        try:
            response = await self._client.post(url, files=files, headers=headers)
        except httpx.TransportError as e:
            logger.error(f"Comparison backend unreachable at {url}: {e}")
            raise BackendUnavailableError(
                f"Comparison backend unreachable: {e}",
                details={"error": type(e).__name__},
                url=url,
            ) from e
        logger.info(f"Backend answered {response.status_code} for {url}")
        return response

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
