"""Shared fixtures for the Clause Compare Relay tests."""

import copy

import pytest

from clause_compare.audit.audit_logger import ComparisonAuditLogger
from clause_compare.audit.database import DatabaseManager
from clause_compare.config.models import RelaySettings


SAMPLE_COMPARISON = {
    "disclaimer": "Automated comparison for review purposes only.",
    "comparison_version": "structural-diff-1.4",
    "baseline": {
        "document_id": "doc-a",
        "hash": "a" * 64,
        "metadata": {"filename": "msa_v1.docx"},
        "clause_count": 3,
    },
    "comparisons": [
        {
            "key": "compare_b",
            "document_id": "doc-b",
            "hash": "b" * 64,
            "metadata": {"filename": "msa_v2.docx"},
            "clause_count": 3,
        },
    ],
    "aligned_clause_rows": 3,
    "results": [
        {
            "clause_id": "1.1",
            "clauses": {
                "baseline": {"clause_id": "1.1", "text": "Payment is due in 30 days."},
                "compare_b": {"clause_id": "1.1", "text": "Payment is due in 60 days."},
                "compare_c": None,
            },
            "diff": {
                "against_b": {
                    "change_type": "Modified",
                    "word_delta": 0,
                    "word_delta_display": "0",
                    "location_change": None,
                    "blocks": [{"op": "replace", "from": "30", "to": "60"}],
                },
                "against_c": None,
            },
            "flags": [
                {"flag": "PAYMENT_TERMS", "reason": "Payment period changed"},
            ],
        },
        {
            "clause_id": "2.3",
            "clauses": {
                "baseline": None,
                "compare_b": {"clause_id": "2.3", "text": "Supplier may subcontract."},
                "compare_c": None,
            },
            "diff": {
                "against_b": {
                    "change_type": "Added",
                    "word_delta": 3,
                    "word_delta_display": "+3",
                    "location_change": None,
                    "blocks": None,
                },
                "against_c": None,
            },
            "flags": [],
        },
        {
            "clause_id": "4.0",
            "clauses": {
                "baseline": {"clause_id": "4.0", "text": "Governing law: England."},
                "compare_b": {"clause_id": "4.0", "text": "Governing law: England."},
                "compare_c": None,
            },
            "diff": {
                "against_b": {
                    "change_type": "Unchanged",
                    "word_delta": 0,
                    "word_delta_display": "0",
                    "location_change": None,
                    "blocks": None,
                },
                "against_c": None,
            },
        },
    ],
    "comparison_output_hash": "f" * 64,
}


@pytest.fixture
def comparison_payload():
    """Two-document comparison payload as returned by the backend."""
    return copy.deepcopy(SAMPLE_COMPARISON)


@pytest.fixture
def three_doc_payload():
    """Three-document comparison payload where only C differs on clause 4.0."""
    data = copy.deepcopy(SAMPLE_COMPARISON)
    data["comparisons"].append({
        "key": "compare_c",
        "document_id": "doc-c",
        "hash": "c" * 64,
        "metadata": {},
        "clause_count": 4,
    })
    data["results"][2]["clauses"]["compare_c"] = {
        "clause_id": "4.0",
        "text": "Governing law: New York.",
    }
    data["results"][2]["diff"]["against_c"] = {
        "change_type": "Modified",
        "word_delta": 1,
        "word_delta_display": "+1",
        "location_change": "moved from 4.0 to 5.1",
        "blocks": None,
    }
    return data


@pytest.fixture
def settings():
    """Relay settings pointing at a fake backend, without auditing."""
    return RelaySettings(
        backend_url="http://backend.test",
        api_base_url="http://api.test",
        audit_enabled=False,
    )


@pytest.fixture
def audit_logger(tmp_path):
    """Audit logger backed by a SQLite file in the test's temp directory."""
    db_manager = DatabaseManager(database_url=f"sqlite:///{tmp_path / 'audit.db'}")
    logger = ComparisonAuditLogger(db_manager=db_manager)
    logger.init_storage()
    yield logger
    db_manager.close()
