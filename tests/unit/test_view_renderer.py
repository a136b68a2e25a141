"""Unit tests for the comparison page renderer."""

import pytest

from clause_compare.parsers.response_parser import ComparisonResponseParser
from clause_compare.viewer.view_renderer import ViewRenderer


@pytest.fixture
def renderer():
    return ViewRenderer(home_url="/dashboard")


class TestViewRenderer:
    """Test HTML rendering of the form and results."""

    def test_empty_form(self, renderer):
        """Test that the bare page has the three file inputs and no results."""
        html = renderer.render_page()

        assert 'href="/dashboard"' in html
        assert 'name="baselineFile"' in html
        assert html.count('name="compareFiles"') == 2
        assert "(optional)" in html
        assert "Clause Comparison" not in html

    def test_banners(self, renderer):
        """Test success and error banners."""
        html = renderer.render_page(message="Comparison complete!", error="Something failed")

        assert "Comparison complete!" in html
        assert "Something failed" in html

    def test_selected_filenames(self, renderer):
        """Test that previously submitted filenames are listed."""
        html = renderer.render_page(selected={"baseline": "a.docx", "compare-b": "b.pdf"})

        assert "Selected: a.docx" in html
        assert "Selected: b.pdf" in html

    def test_two_document_results(self, renderer, comparison_payload):
        """Test rendering of a two-document comparison."""
        response = ComparisonResponseParser.parse(comparison_payload)

        html = renderer.render_page(response=response)

        assert "Automated comparison for review purposes only." in html
        assert "Clause Comparison (3 clauses)" in html
        assert "Document Hashes (audit trail)" in html
        assert f"Output hash: {'f' * 16}…" in html
        assert "vs B: +3 words" in html
        assert "1 flag" in html
        assert "PAYMENT_TERMS:" in html
        assert "do not constitute legal advice" in html
        assert "Not present" in html
        assert '<p class="box-label">Document C</p>' not in html
        assert 'class="clause-row row-modified"' in html
        assert 'class="clause-row row-added"' in html

    def test_three_document_results(self, renderer, three_doc_payload):
        """Test that a third document adds its column and C-only changes."""
        response = ComparisonResponseParser.parse(three_doc_payload)

        html = renderer.render_page(response=response)

        assert '<p class="box-label">Document C</p>' in html
        assert "vs C: +1 words" in html
        assert "Location shift (vs C): moved from 4.0 to 5.1" in html
        assert 'id="clause-4.0"' in html
        # Clause 4.0 is unchanged against B but modified against C
        assert html.count('class="clause-row row-modified"') == 2
        assert 'boxes three' in html

    def test_text_is_escaped(self, renderer, comparison_payload):
        """Test that clause text is HTML-escaped."""
        comparison_payload["results"][0]["clauses"]["baseline"]["text"] = "<script>x</script>"
        response = ComparisonResponseParser.parse(comparison_payload)

        html = renderer.render_page(response=response)

        assert "<script>x</script>" not in html
        assert "&lt;script&gt;x&lt;/script&gt;" in html
