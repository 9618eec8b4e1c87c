"""Tests for app.services.categorization."""

import pytest

from app.services.categorization import (
    CATEGORY_DEFINITIONS,
    categorize_text,
    categorize_ticket_title,
    detect_all_issues,
    detect_customer_intent,
    get_all_categories,
    title_categories,
)


# ── Ticket title categories ─────────────────────────────────────────


class TestCategorizeTicketTitle:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Automatic reply: out of office", "Automated System Messages"),
            ("Borrower payment not applied to loan 0123456789", "Payment Issues"),
            ("Escrow shortage analysis request", "Escrow"),
            ("Reset online portal password", "Account Access"),
            ("Fwd: hello", "Communication/Forwarded"),
        ],
    )
    def test_keyword_categories(self, title, expected):
        assert categorize_ticket_title(title) == expected

    def test_first_matching_category_wins(self):
        # "payment" and "escrow" both match; Payment Issues is listed first
        assert categorize_ticket_title("Escrow payment question") == "Payment Issues"

    def test_loan_number_fallback(self):
        assert categorize_ticket_title("RPM1234567") == "Loan-Specific Inquiry"
        assert categorize_ticket_title("Loan # 55") == "Loan-Specific Inquiry"

    def test_case_insensitive(self):
        assert categorize_ticket_title("PAYMENT MISSING") == "Payment Issues"

    def test_other_when_nothing_matches(self):
        assert categorize_ticket_title("xyz") == "Other"
        assert categorize_ticket_title("") == "Other"
        assert categorize_ticket_title(None) == "Other"

    def test_title_categories_lists_fallbacks_last(self):
        names = title_categories()
        assert names[-2:] == ["Loan-Specific Inquiry", "Other"]
        assert names[0] == "Automated System Messages"


# ── Multi-level categories ──────────────────────────────────────────


class TestCategorizeText:
    def test_specific_subcategory(self):
        result = categorize_text("I was charged twice for my payment")
        assert result.category == "Payment Issues"
        assert result.subcategory == "Duplicate Payment"
        assert result.matched_keywords == ["charged twice"]
        assert result.confidence == 1.0

    def test_escalation(self):
        result = categorize_text("I want to speak to a supervisor")
        assert result.category == "Escalation"
        assert result.subcategory == "Customer Escalation"

    def test_title_is_included(self):
        result = categorize_text("please help", title="I want to speak to a supervisor")
        assert result.category == "Escalation"

    def test_uncategorized_default(self):
        result = categorize_text("hello there")
        assert result.category == "Other"
        assert result.subcategory == "Uncategorized"
        assert result.confidence == 0.3

    def test_empty_text(self):
        assert categorize_text("").category == "Other"

    def test_confidence_never_exceeds_one(self):
        result = categorize_text("first payment how to pay where do i send payment address")
        assert result.confidence <= 1.0

    def test_all_issues_contains_winner(self):
        result = categorize_text("My escrow payment is wrong")
        assert result.category in result.all_issues


class TestDetectAllIssues:
    def test_multiple_categories(self):
        assert detect_all_issues("my escrow payment") == ["Payment Issues", "Escrow"]

    def test_default(self):
        assert detect_all_issues("hello") == ["General Inquiry"]


class TestDetectCustomerIntent:
    def test_first_customer_statement(self):
        text = "customer: how do i pay my bill agent: sure customer: what is my balance"
        assert detect_customer_intent(text) == "make_payment"

    def test_access(self):
        assert detect_customer_intent("customer: I forgot password agent: ok") == "access_account"

    def test_no_customer_turn(self):
        assert detect_customer_intent("agent: hello") == "other"

    def test_unmatched_statement(self):
        assert detect_customer_intent("customer: good morning") == "other"


class TestCategoryCatalogue:
    def test_get_all_categories(self):
        tree = get_all_categories()
        assert len(tree) == len(CATEGORY_DEFINITIONS) == 11
        escrow = next(c for c in tree if c.category == "Escrow")
        assert "Escrow Analysis" in escrow.subcategories
