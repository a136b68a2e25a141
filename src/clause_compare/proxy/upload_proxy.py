"""Upload proxy that relays comparison uploads to the backend."""

import logging
from typing import Any, Optional

from ..audit.audit_logger import ComparisonAuditLogger
from ..audit.events import ComparisonAuditEvent
from ..backend.client import BackendClient, UpstreamResponse
from ..models.enums import AuditSource
from ..parsers.exceptions import RelayError
from ..parsers.upload_parser import UploadParser

logger = logging.getLogger(__name__)


class UploadProxy:
    """
    Relays a multipart comparison upload to the backend.

    The incoming form is parsed and buffered, re-wrapped into a new
    multipart body and forwarded. The backend's status code and JSON body
    are returned untouched.
    """

    def __init__(
        self,
        client: BackendClient,
        parser: Optional[UploadParser] = None,
        audit_logger: Optional[ComparisonAuditLogger] = None,
    ):
        """
        Initialize the upload proxy.

        Args:
            client: Backend client used to forward the upload.
            parser: Upload parser; defaults to one using the client's size limit.
            audit_logger: Optional audit logger recording each relay.
        """
        self.client = client
        self.parser = parser or UploadParser(max_file_size=client.settings.max_file_size)
        self.audit_logger = audit_logger

    async def handle(self, form: Any) -> UpstreamResponse:
        """
        Parse, forward and audit one upload.

        Args:
            form: Multipart form exposing ``getlist``.

        Returns:
            The backend's response.

        Raises:
            RelayError: If the upload is invalid or the backend is unreachable.
        """
        filenames = []
        try:
            upload = self.parser.parse(form)
            filenames = upload.filenames
            if len(upload.compares) > self.client.settings.max_compare_files:
                logger.warning(
                    f"Dropping {len(upload.compares) - self.client.settings.max_compare_files} "
                    f"extra compareFiles upload(s)"
                )
            upstream = await self.client.forward_upload(upload)
        except RelayError as e:
            self._audit(ComparisonAuditEvent.from_error(AuditSource.PROXY, filenames, e.message))
            raise

        self._audit(
            ComparisonAuditEvent.from_payload(
                AuditSource.PROXY,
                filenames,
                upstream.status_code,
                upstream.data,
            )
        )
        return upstream

    def _audit(self, event: ComparisonAuditEvent) -> None:
        if self.audit_logger is not None:
            self.audit_logger.record(event)
