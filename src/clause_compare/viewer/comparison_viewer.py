"""Comparison viewer: form submission and result rendering."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..audit.audit_logger import ComparisonAuditLogger
from ..audit.events import ComparisonAuditEvent
from ..backend.client import BackendClient
from ..models.comparison import ComparisonResponse
from ..models.enums import AuditSource
from ..models.upload import ParsedUpload
from ..parsers.exceptions import (
    AuthenticationRequiredError,
    RelayError,
    UploadValidationError,
)
from ..parsers.upload_parser import BASELINE_FIELD, COMPARE_FIELD, UploadParser
from .view_renderer import ViewRenderer

logger = logging.getLogger(__name__)

MISSING_DOCUMENTS_MESSAGE = (
    "Please upload at least a baseline document and one comparison document."
)
NOT_LOGGED_IN_MESSAGE = "You are not logged in. Please log in to continue."
COMPLETE_MESSAGE = "Comparison complete!"
FALLBACK_ERROR_MESSAGE = "Failed to compare documents. Please try again."

# Input ids of the compared documents, in slot order
_COMPARE_INPUT_IDS = ["compare-b", "compare-c"]


@dataclass
class ViewerOutcome:
    """State of the comparison page after a submission."""
    response: Optional[ComparisonResponse] = None
    message: Optional[str] = None
    error: Optional[str] = None
    selected: Dict[str, str] = field(default_factory=dict)


class ComparisonViewer:
    """
    Submits up to three documents to the backend and renders the result.

    Unlike the upload proxy, the viewer authenticates against the backend
    with the user's bearer token and renders the parsed comparison rather
    than returning it verbatim.
    """

    def __init__(
        self,
        client: BackendClient,
        renderer: ViewRenderer,
        parser: Optional[UploadParser] = None,
        audit_logger: Optional[ComparisonAuditLogger] = None,
    ):
        self.client = client
        self.renderer = renderer
        self.parser = parser or UploadParser(max_file_size=client.settings.max_file_size)
        self.audit_logger = audit_logger

    async def submit(self, form: Any, token: Optional[str]) -> ViewerOutcome:
        """
        Validate the form, run the comparison and collect the page state.

        Errors never propagate: they end up in ``ViewerOutcome.error``.
        """
        outcome = ViewerOutcome()
        try:
            upload = self._read_upload(form, outcome)
            if not token:
                raise AuthenticationRequiredError(NOT_LOGGED_IN_MESSAGE)
        except RelayError as e:
            outcome.error = e.message
            return outcome

        try:
            response = await self.client.compare_documents(upload, token)
        except RelayError as e:
            logger.error(f"compareDocuments error: {e.message}")
            outcome.error = e.message or FALLBACK_ERROR_MESSAGE
            self._audit(
                ComparisonAuditEvent.from_error(
                    AuditSource.VIEWER,
                    upload.filenames,
                    outcome.error,
                    status_code=getattr(e, "status_code", None),
                )
            )
            return outcome

        self._audit(
            ComparisonAuditEvent.from_comparison(AuditSource.VIEWER, upload.filenames, response)
        )
        outcome.response = response
        outcome.message = COMPLETE_MESSAGE
        return outcome

    def render(self, outcome: Optional[ViewerOutcome] = None, action: str = "") -> str:
        """Render the page for an outcome, or the empty form."""
        outcome = outcome or ViewerOutcome()
        return self.renderer.render_page(
            response=outcome.response,
            message=outcome.message,
            error=outcome.error,
            selected=outcome.selected,
            action=action,
        )

    def _read_upload(self, form: Any, outcome: ViewerOutcome) -> ParsedUpload:
        baselines = self.parser.read_files(form, BASELINE_FIELD)
        compares = self.parser.read_files(form, COMPARE_FIELD)[:len(_COMPARE_INPUT_IDS)]

        if baselines:
            outcome.selected["baseline"] = baselines[0].filename
        for input_id, document in zip(_COMPARE_INPUT_IDS, compares):
            outcome.selected[input_id] = document.filename

        if not baselines or not compares:
            raise UploadValidationError(MISSING_DOCUMENTS_MESSAGE)
        return ParsedUpload(baseline=baselines[0], compares=compares)

    def _audit(self, event: ComparisonAuditEvent) -> None:
        if self.audit_logger is not None:
            self.audit_logger.record(event)
