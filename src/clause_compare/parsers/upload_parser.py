"""Parsing of multipart comparison uploads."""

import logging
from typing import Any, List, Optional

from ..models.upload import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_FILENAME,
    ParsedUpload,
    UploadedDocument,
)
from .exceptions import UploadValidationError

logger = logging.getLogger(__name__)

BASELINE_FIELD = "baselineFile"
COMPARE_FIELD = "compareFiles"

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB


class UploadParser:
    """
    Extracts the baseline and compared documents from a multipart form.

    Expected client keys:
    - ``baselineFile``: single file (the first one wins if several are sent)
    - ``compareFiles``: one or more files

    Each file is read fully into memory so it can be re-sent to the
    backend in a fresh multipart body.
    """

    def __init__(self, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        """
        Initialize the upload parser.

        Args:
            max_file_size: Largest accepted file, in bytes.
        """
        self.max_file_size = max_file_size

    def parse(self, form: Any) -> ParsedUpload:
        """
        Parse a form into a validated upload.

        Args:
            form: A multi-dict exposing ``getlist`` (e.g. Starlette ``FormData``).

        Returns:
            ParsedUpload with one baseline and at least one compared document.

        Raises:
            UploadValidationError: If a required file is missing or a file is too large.
        """
        baselines = self.read_files(form, BASELINE_FIELD)
        if not baselines:
            raise UploadValidationError("Missing baselineFile upload")

        compares = self.read_files(form, COMPARE_FIELD)
        if not compares:
            raise UploadValidationError("Missing compareFiles upload")

        logger.debug(
            f"Parsed upload: baseline={baselines[0].filename}, "
            f"compares={[c.filename for c in compares]}"
        )
        return ParsedUpload(baseline=baselines[0], compares=compares)

    def read_file(self, field_name: str, value: Any) -> Optional[UploadedDocument]:
        """
        Buffer one form value into an UploadedDocument.

        Returns None for non-file values and for empty file inputs (no
        filename and no content), which browsers send for unselected
        optional inputs.
        """
        if not _is_upload(value):
            return None

        content = self._read_limited(value)
        filename = value.filename or ""
        if not filename and not content:
            return None

        if len(content) > self.max_file_size:
            raise UploadValidationError(
                f"File {filename or DEFAULT_FILENAME} exceeds the maximum upload size "
                f"of {self.max_file_size // (1024 * 1024)}MB",
                details={"field": field_name, "max_file_size": self.max_file_size},
            )

        return UploadedDocument(
            field_name=field_name,
            content=content,
            filename=filename or DEFAULT_FILENAME,
            content_type=getattr(value, "content_type", None) or DEFAULT_CONTENT_TYPE,
        )

    def read_files(self, form: Any, field_name: str) -> List[UploadedDocument]:
        documents = []
        for value in form.getlist(field_name):
            document = self.read_file(field_name, value)
            if document is not None:
                documents.append(document)
        return documents

    def _read_limited(self, value: Any) -> bytes:
        """Read at most one byte past the size limit."""
        stream = value.file
        if hasattr(stream, "seek"):
            stream.seek(0)
        return stream.read(self.max_file_size + 1)


def _is_upload(value: Any) -> bool:
    return hasattr(value, "file") and hasattr(value, "filename")
