"""Data models for buffered document uploads."""

from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_FILENAME = "upload"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class UploadedDocument:
    """A single uploaded file, fully buffered in memory."""
    field_name: str
    content: bytes
    filename: str = DEFAULT_FILENAME
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)

    def as_multipart(self) -> Tuple[str, Tuple[str, bytes, str]]:
        """Return the ``(field, (filename, content, type))`` tuple httpx expects."""
        return (self.field_name, (self.filename, self.content, self.content_type))


@dataclass
class ParsedUpload:
    """
    A validated comparison upload.

    Holds one baseline document and at least one compared document.
    """
    baseline: UploadedDocument
    compares: List[UploadedDocument] = field(default_factory=list)

    @property
    def filenames(self) -> List[str]:
        """Filenames in slot order: baseline, B, C."""
        return [self.baseline.filename] + [c.filename for c in self.compares]

    def to_multipart(self, max_compares: int = 2) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        """
        Build the multipart field list sent to the backend.

        Args:
            max_compares: Compared documents beyond this count are dropped.
        """
        parts = [self.baseline.as_multipart()]
        parts.extend(c.as_multipart() for c in self.compares[:max_compares])
        return parts
