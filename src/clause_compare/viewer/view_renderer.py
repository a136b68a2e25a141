"""View rendering for the document comparison page."""

from pathlib import Path
from typing import Dict, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models.comparison import AlignedResult, ClauseText, ComparisonResponse
from .presentation import (
    CHANGE_BADGE,
    CHANGE_BORDER,
    FLAGS_DISCLAIMER,
    audit_lines,
    effective_change_type,
    flag_badge,
    location_shifts,
    summary_counts,
    word_delta_label,
)

# Upload inputs in slot order: (input id, form field, label, required)
FILE_INPUTS = [
    ("baseline", "baselineFile", "Baseline Document", True),
    ("compare-b", "compareFiles", "Compare Document B", True),
    ("compare-c", "compareFiles", "Compare Document C", False),
]

ACCEPTED_TYPES = (
    ".txt,.pdf,.docx,text/plain,application/pdf,"
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)

PACKAGE_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"


class ViewRenderer:
    """
    Turns a comparison response into the comparison page.

    The page layout lives in ``templates/comparison.html``; this class
    only prepares row dictionaries from the display rules in
    :mod:`clause_compare.viewer.presentation`.
    """

    def __init__(self, template_dir: Optional[str] = None, home_url: str = "/"):
        """
        Args:
            template_dir: Alternative template directory, mainly for tests.
                Defaults to the templates shipped with the package.
            home_url: Where the "Back to Home" link points.
        """
        self.template_dir = template_dir or str(PACKAGE_TEMPLATES)
        self.home_url = home_url
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(["html"]),
        )

    def render_page(
        self,
        response: Optional[ComparisonResponse] = None,
        message: Optional[str] = None,
        error: Optional[str] = None,
        selected: Optional[Dict[str, str]] = None,
        action: str = "",
    ) -> str:
        """
        Render the comparison page.

        Args:
            response: Comparison to display below the form, if any.
            message: Success banner text.
            error: Error banner text.
            selected: Input id -> filename of the documents last submitted.
            action: Form action URL; empty posts back to the same page.

        Returns:
            HTML string for the page.
        """
        selected = selected or {}
        inputs = [
            {
                'id': input_id,
                'name': field_name,
                'label': label,
                'required': required,
                'selected': selected.get(input_id),
            }
            for input_id, field_name, label, required in FILE_INPUTS
        ]

        template = self.env.get_template('comparison.html')
        return template.render(
            home_url=self.home_url,
            action=action,
            inputs=inputs,
            accepted_types=ACCEPTED_TYPES,
            message=message,
            error=error,
            results=self._prepare_results(response) if response is not None else None,
        )

    def _prepare_results(self, response: ComparisonResponse) -> Dict:
        """Convert a comparison to template-friendly format."""
        has_third_doc = response.has_third_document
        return {
            'disclaimer': response.disclaimer,
            'summary': [
                {
                    'label': change_type.value,
                    'count': count,
                    'badge_class': CHANGE_BADGE[change_type],
                }
                for change_type, count in summary_counts(response.results)
            ],
            'audit_lines': audit_lines(response),
            'aligned_clause_rows': response.aligned_clause_rows,
            'has_third_doc': has_third_doc,
            'rows': [self._prepare_row(r, has_third_doc) for r in response.results],
        }

    def _prepare_row(self, result: AlignedResult, has_third_doc: bool) -> Dict:
        """Convert one aligned clause to template-friendly format."""
        change_type = effective_change_type(result, has_third_doc)
        deltas = [word_delta_label(result.primary_diff, "B")]
        if has_third_doc:
            deltas.append(word_delta_label(result.secondary_diff, "C"))

        boxes = [
            self._prepare_clause_box("Baseline", result.clauses.baseline),
            self._prepare_clause_box("Document B", result.clauses.compare_b),
        ]
        if has_third_doc:
            boxes.append(self._prepare_clause_box("Document C", result.clauses.compare_c))

        return {
            'clause_id': result.clause_id,
            'change_type': change_type.value,
            'row_class': CHANGE_BORDER[change_type],
            'badge_class': CHANGE_BADGE[change_type],
            'word_deltas': [d for d in deltas if d],
            'flag_badge': flag_badge(result.flags),
            'boxes': boxes,
            'location_shifts': location_shifts(result),
            'flags': [{'flag': f.flag, 'reason': f.reason} for f in result.flags],
            'flags_disclaimer': FLAGS_DISCLAIMER,
        }

    def _prepare_clause_box(self, label: str, clause: Optional[ClauseText]) -> Dict:
        return {
            'label': label,
            'text': clause.text if clause is not None else None,
        }
