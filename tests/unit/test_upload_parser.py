"""Unit tests for multipart upload parsing."""

import io

import pytest
from starlette.datastructures import FormData, Headers, UploadFile

from clause_compare.parsers.exceptions import UploadValidationError
from clause_compare.parsers.upload_parser import UploadParser


def _upload(content: bytes, filename: str = "doc.txt", content_type: str = "text/plain"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestUploadParser:
    """Test UploadParser functionality."""

    def test_parse_baseline_and_compares(self):
        """Test parsing a complete three-document upload."""
        form = FormData([
            ("baselineFile", _upload(b"baseline", "a.docx", "application/octet-stream")),
            ("compareFiles", _upload(b"second", "b.pdf", "application/pdf")),
            ("compareFiles", _upload(b"third", "c.txt")),
        ])

        upload = UploadParser().parse(form)

        assert upload.baseline.filename == "a.docx"
        assert upload.baseline.content == b"baseline"
        assert [c.filename for c in upload.compares] == ["b.pdf", "c.txt"]
        assert upload.compares[0].content_type == "application/pdf"
        assert upload.filenames == ["a.docx", "b.pdf", "c.txt"]

    def test_first_baseline_wins(self):
        """Test that only the first baselineFile is used."""
        form = FormData([
            ("baselineFile", _upload(b"one", "one.txt")),
            ("baselineFile", _upload(b"two", "two.txt")),
            ("compareFiles", _upload(b"cmp", "cmp.txt")),
        ])

        upload = UploadParser().parse(form)

        assert upload.baseline.filename == "one.txt"

    def test_missing_baseline(self):
        """Test that a missing baseline is rejected."""
        form = FormData([("compareFiles", _upload(b"cmp"))])

        with pytest.raises(UploadValidationError) as exc_info:
            UploadParser().parse(form)

        assert exc_info.value.message == "Missing baselineFile upload"

    def test_missing_compares(self):
        """Test that an upload without compared documents is rejected."""
        form = FormData([("baselineFile", _upload(b"base"))])

        with pytest.raises(UploadValidationError) as exc_info:
            UploadParser().parse(form)

        assert exc_info.value.message == "Missing compareFiles upload"

    def test_text_fields_are_not_files(self):
        """Test that plain form values under the file keys are ignored."""
        form = FormData([
            ("baselineFile", "not-a-file"),
            ("compareFiles", _upload(b"cmp")),
        ])

        with pytest.raises(UploadValidationError):
            UploadParser().parse(form)

    def test_empty_optional_input_skipped(self):
        """Test that an unselected file input is not treated as a document."""
        form = FormData([
            ("baselineFile", _upload(b"base", "a.txt")),
            ("compareFiles", _upload(b"cmp", "b.txt")),
            ("compareFiles", _upload(b"", "")),
        ])

        upload = UploadParser().parse(form)

        assert len(upload.compares) == 1

    def test_defaults_for_unnamed_upload(self):
        """Test filename and content type defaults."""
        parser = UploadParser()
        value = UploadFile(file=io.BytesIO(b"data"), filename="")

        document = parser.read_file("baselineFile", value)

        assert document.filename == "upload"
        assert document.content_type == "application/octet-stream"

    def test_file_too_large(self):
        """Test that files above the size limit are rejected."""
        parser = UploadParser(max_file_size=4)
        form = FormData([
            ("baselineFile", _upload(b"12345", "big.txt")),
            ("compareFiles", _upload(b"1")),
        ])

        with pytest.raises(UploadValidationError) as exc_info:
            parser.parse(form)

        assert "big.txt" in exc_info.value.message
        assert exc_info.value.details["field"] == "baselineFile"

    def test_multipart_drops_extra_compares(self):
        """Test that only two compared documents are sent on."""
        form = FormData([
            ("baselineFile", _upload(b"base", "a.txt")),
            ("compareFiles", _upload(b"b", "b.txt")),
            ("compareFiles", _upload(b"c", "c.txt")),
            ("compareFiles", _upload(b"d", "d.txt")),
        ])

        parts = UploadParser().parse(form).to_multipart(max_compares=2)

        assert [p[0] for p in parts] == ["baselineFile", "compareFiles", "compareFiles"]
        assert [p[1][0] for p in parts] == ["a.txt", "b.txt", "c.txt"]
