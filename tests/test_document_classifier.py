"""Tests for the pattern-count document classifier."""

import re
from types import MappingProxyType

import pytest

from app.models.analysis import DocumentType
from app.services.document_classifier import (
    NO_SIGNAL_CONFIDENCE,
    _round_confidence,
    classify_document,
)


class TestClassifyDocument:
    """Tests for classify_document."""

    def test_empty_text_is_other(self):
        result = classify_document("")

        assert result.doc_type == DocumentType.OTHER
        assert result.confidence == NO_SIGNAL_CONFIDENCE == 0.90
        assert result.score == 0
        assert result.signals == {"reason": "no_pattern_matched"}

    def test_unrelated_text_is_other(self):
        result = classify_document("The quick brown fox jumps over the lazy dog")

        assert result.doc_type == DocumentType.OTHER
        assert result.confidence == 0.9

    def test_single_invoice_signal(self):
        result = classify_document("invoice")

        assert result.doc_type == DocumentType.INVOICE
        assert result.score == 1
        assert result.confidence == 0.25

    def test_matching_is_case_insensitive(self):
        assert classify_document("INVOICE").doc_type == DocumentType.INVOICE

    def test_pattern_counts_once_however_often_it_matches(self):
        result = classify_document("invoice invoice invoice")

        assert result.score == 1
        assert result.confidence == 0.25

    def test_invoice_with_all_signals(self):
        result = classify_document("Invoice Number 12\nBill To: Jane\nAmount Due: 10")

        assert result.doc_type == DocumentType.INVOICE
        assert result.score == 4
        assert result.confidence == 0.57
        assert result.signals["matched_patterns"] == [
            r"invoice",
            r"bill\s?to",
            r"amount\s?due",
            r"invoice\s?(number|#)",
        ]

    def test_report_signals(self):
        result = classify_document("Quarterly report: summary of findings")

        assert result.doc_type == DocumentType.REPORT
        assert result.score == 3
        assert result.confidence == 0.5

    def test_five_contract_signals_round_half_up(self):
        text = (
            "This agreement is a contract between Party A and Party B under "
            "the terms and conditions below. Witness:"
        )
        result = classify_document(text)

        assert result.doc_type == DocumentType.CONTRACT
        assert result.score == 5
        assert result.confidence == 0.63

    def test_four_contract_signals(self):
        text = "This agreement is a contract between Party A and Party B."
        result = classify_document(text)

        assert result.score == 3
        result = classify_document(text + " Terms and conditions apply.")
        assert result.score == 4
        assert result.confidence == 0.57

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("invoice agreement", DocumentType.INVOICE),
            ("contract report", DocumentType.CONTRACT),
            ("invoice summary", DocumentType.INVOICE),
        ],
    )
    def test_tie_goes_to_first_declared_type(self, text, expected):
        result = classify_document(text)

        assert result.doc_type == expected
        assert result.confidence == 0.25

    def test_later_type_wins_with_strictly_higher_score(self):
        result = classify_document("invoice for the contract agreement with party a")

        assert result.doc_type == DocumentType.CONTRACT
        assert result.score == 3
        assert result.confidence == 0.5

    def test_custom_table_tie_break_follows_table_order(self):
        table = MappingProxyType({
            DocumentType.REPORT: (re.compile("alpha", re.IGNORECASE),),
            DocumentType.CONTRACT: (re.compile("alpha", re.IGNORECASE),),
        })

        result = classify_document("Alpha", table=table)

        assert result.doc_type == DocumentType.REPORT
        assert result.confidence == 0.25

    def test_confidence_stays_below_one(self):
        text = "agreement contract party 1 terms and conditions witness"
        result = classify_document(text)

        assert 0 < result.confidence < 1


class TestRoundConfidence:
    """Tests for two-decimal confidence rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.625, 0.63),
            (0.25, 0.25),
            (4 / 7, 0.57),
            (2 / 5, 0.4),
            (1 / 3, 0.33),
        ],
    )
    def test_rounds_to_two_decimals(self, value, expected):
        assert _round_confidence(value) == expected
