"""Keyword categorization for ticket titles, ticket bodies and call transcripts.

Two schemes live here:

- a flat, ordered table used to label ticket titles on the dashboards
  (first matching category wins)
- a multi-level scheme with weighted subcategories and a confidence score,
  used by trend analytics over tickets and transcripts
"""

import re
from dataclasses import dataclass

from ..schemas.analytics import CategoryResult, CategoryTree

# ── Flat ticket-title categories ─────────────────────────────────────

# Order matters: the first category with a matching term wins.
TITLE_CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Automated System Messages": ["automatic reply", "unmonitored mailbox", "sagentsupport", "auto-reply"],
    "Payment Issues": [
        "payment", "pay ", "ach", "autopay", "draft", "misapplied",
        "overpayment", "underpayment", "double draft",
    ],
    "Escrow": ["escrow", "tax bill", "tax ", "insurance", "hoi ", "pmi", "shortage", "surplus", "flood", "hazard"],
    "Documentation": [
        "statement", "letter", "document", "1098", "payoff", "release",
        "mortgage release", "amortization", "confirmation",
    ],
    "Transfer/Boarding": [
        "transfer", "board", "cenlar", "sold", "subservicer", "lakeview",
        "servicemac", "notice of servicing",
    ],
    "Voice/Alert Requests": ["voice mail", "voicemail", "alert", "interim"],
    "Account Access": ["login", "password", "access", "portal", "locked out", "reset", "website link", "online"],
    "Loan Info Request": ["loan number", "loan info", "balance", "rate", "mailing address", "wire", "reimbursement"],
    "Insurance/Coverage": ["mycoverageinfo", "covius", "coverage", "policy"],
    "Loan Changes": [
        "recast", "buyout", "assumption", "modification", "forbearance",
        "hardship", "loss mitigation", "deferment",
    ],
    "Complaints/Escalations": ["complaint", "escalat", "elevated", "urgent", "mess", "facebook", "issue"],
    "General Inquiry": ["help", "question", "request", "information", "needed", "assistance"],
    "Communication/Forwarded": ["fw:", "fwd:", "re:", "follow up", "call back"],
}

LOAN_NUMBER_PATTERN = re.compile(r"\b(r[a-z]{2}\d{7,}|0\d{9}|\d{10,}|loan\s*#?\s*\d+)", re.IGNORECASE)

LOAN_SPECIFIC = "Loan-Specific Inquiry"
OTHER = "Other"


def categorize_ticket_title(title: str | None) -> str:
    """Label a ticket title with its dashboard category."""
    text = title or ""
    lowered = text.lower()
    for category, terms in TITLE_CATEGORY_KEYWORDS.items():
        if any(term in lowered for term in terms):
            return category
    if LOAN_NUMBER_PATTERN.search(text):
        return LOAN_SPECIFIC
    return OTHER


def title_categories() -> list[str]:
    return [*TITLE_CATEGORY_KEYWORDS, LOAN_SPECIFIC, OTHER]


# ── Multi-level categories ───────────────────────────────────────────


@dataclass(frozen=True)
class Subcategory:
    name: str
    keywords: tuple[str, ...]
    weight: int


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    keywords: tuple[str, ...]
    subcategories: tuple[Subcategory, ...]


def _sub(name: str, keywords: list[str], weight: int) -> Subcategory:
    return Subcategory(name, tuple(keywords), weight)


CATEGORY_DEFINITIONS: list[CategoryDefinition] = [
    CategoryDefinition(
        "Payment Issues",
        ("payment", "pay", "autopay", "ach", "paying", "bill"),
        (
            _sub("First Payment Assistance", [
                "first payment", "initial payment", "how to pay", "where do i send",
                "payment address", "where to pay", "payment location",
            ], 100),
            _sub("Payment Failure", [
                "declined", "failed", "didn't go through", "bounced", "rejected", "payment error",
            ], 95),
            _sub("Duplicate Payment", [
                "duplicate", "charged twice", "double payment", "paid twice", "multiple charges",
            ], 90),
            _sub("Autopay/Recurring Payment Issues", [
                "autopay", "recurring", "automatic payment", "auto pay", "scheduled payment",
            ], 85),
            _sub("Payment Location Confusion", [
                "where do i send", "payment address", "where to mail", "payment location", "send payment",
            ], 80),
            _sub("General Payment Inquiry", ["payment", "pay"], 50),
        ),
    ),
    CategoryDefinition(
        "Account Access",
        ("login", "password", "access", "locked out", "account"),
        (
            _sub("Password/Login Issues", [
                "password", "reset", "forgot password", "can't log in", "login problem", "locked out",
            ], 95),
            _sub("Account Locked", [
                "locked", "frozen", "suspended", "disabled account", "account locked",
            ], 90),
            _sub("Registration Issues", [
                "register", "sign up", "create account", "new account", "registration",
            ], 85),
            _sub("General Access Issues", ["access", "login"], 50),
        ),
    ),
    CategoryDefinition(
        "Loan Transfer",
        ("transfer", "servicer", "sold my loan", "boarding", "new servicer"),
        (
            _sub("Post-Transfer Payment Confusion", [
                "where do i pay", "transfer", "new servicer", "where to send payment",
            ], 95),
            _sub("Missing Transfer Notice", [
                "didn't receive", "notice", "transfer letter", "no notification", "never got notice",
            ], 90),
            _sub("Transfer Status Inquiry", [
                "when will transfer", "transfer date", "is my loan transferred", "transfer status",
            ], 85),
            _sub("General Transfer Inquiry", ["transfer", "sold"], 50),
        ),
    ),
    CategoryDefinition(
        "Document Requests",
        ("document", "statement", "payoff", "letter", "copy", "paperwork"),
        (
            _sub("Payoff Statement", [
                "payoff", "payoff quote", "payoff amount", "payoff letter", "closing", "refinancing",
            ], 95),
            _sub("Mortgage Statement", [
                "mortgage statement", "statement", "billing statement", "monthly statement",
            ], 90),
            _sub("Tax Documents", ["1098", "tax", "tax document", "tax form", "1099"], 85),
            _sub("Insurance Documents", [
                "insurance", "hazard insurance", "homeowners insurance", "insurance certificate",
            ], 80),
            _sub("General Document Request", ["document", "copy", "send me"], 50),
        ),
    ),
    CategoryDefinition(
        "Escrow",
        ("escrow", "tax", "insurance", "impound"),
        (
            _sub("Escrow Analysis", [
                "escrow analysis", "escrow review", "escrow adjustment", "escrow shortage", "escrow surplus",
            ], 95),
            _sub("Tax Payment Issues", ["property tax", "tax payment", "tax bill", "taxes not paid"], 90),
            _sub("Insurance Payment Issues", [
                "insurance payment", "homeowners insurance", "insurance not paid", "insurance lapse",
            ], 85),
            _sub("General Escrow Inquiry", ["escrow"], 50),
        ),
    ),
    CategoryDefinition(
        "Escalation",
        ("supervisor", "manager", "complaint", "escalate", "lawyer", "attorney", "legal"),
        (
            _sub("Customer Escalation", [
                "speak to supervisor", "talk to manager", "escalate", "supervisor", "manager",
            ], 100),
            _sub("Formal Complaint", ["complaint", "file a complaint", "formal complaint", "complain"], 95),
            _sub("Legal Threat", ["lawyer", "attorney", "legal action", "sue", "lawsuit", "legal"], 90),
            _sub("General Escalation", ["escalate", "unacceptable"], 50),
        ),
    ),
    CategoryDefinition(
        "Voice/Alert Requests",
        ("voice", "alert", "notification", "text", "call preference"),
        (
            _sub("Voice Preference", [
                "voice preference", "calling preference", "stop calling", "do not call",
                "communication preference",
            ], 90),
            _sub("Alert Setup", [
                "alert", "notification", "text message", "email alert", "set up alert",
            ], 85),
            _sub("General Voice/Alert Request", ["voice", "alert"], 50),
        ),
    ),
    CategoryDefinition(
        "Loan Information",
        ("loan info", "account information", "balance", "interest rate", "loan details"),
        (
            _sub("Balance Inquiry", [
                "balance", "current balance", "principal balance", "what do i owe", "amount owed",
            ], 90),
            _sub("Interest Rate Inquiry", ["interest rate", "rate", "apr", "current rate"], 85),
            _sub("Loan Details", ["loan details", "account details", "loan information"], 80),
            _sub("Payment History", ["payment history", "past payments", "payment record"], 75),
            _sub("General Loan Inquiry", ["information", "info"], 50),
        ),
    ),
    CategoryDefinition(
        "Loan Modifications",
        ("modification", "loan change", "refinance", "forbearance", "hardship"),
        (
            _sub("Forbearance Request", [
                "forbearance", "hardship", "financial difficulty", "can't pay", "payment relief",
            ], 95),
            _sub("Loan Modification", ["modification", "loan mod", "modify loan", "change terms"], 90),
            _sub("Refinance Inquiry", ["refinance", "refi", "refinancing"], 85),
            _sub("General Modification Inquiry", ["change", "modification"], 50),
        ),
    ),
    CategoryDefinition(
        "Automated System Messages",
        ("automated", "system message", "auto-generated", "automatic"),
        (
            _sub("System Generated", ["automated", "system message", "auto-generated"], 100),
        ),
    ),
    CategoryDefinition(
        "Communication",
        ("forward", "forwarded", "communication", "update"),
        (
            _sub("Forwarded Message", ["forwarded", "forward", "fwd"], 90),
            _sub("Update Request", ["update", "status update", "follow up"], 80),
            _sub("General Communication", ["communication"], 50),
        ),
    ),
]

UNCATEGORIZED = CategoryResult(category="Other", subcategory="Uncategorized", confidence=0.3)


def _confidence(matched: list[str], weight: int) -> float:
    avg_len = sum(len(kw) for kw in matched) / len(matched)
    specificity = min(avg_len / 20, 0.3)
    match_bonus = min(len(matched) * 0.1, 0.3)
    weight_bonus = weight / 100 * 0.4
    return min(0.4 + specificity + match_bonus + weight_bonus, 1.0)


def categorize_text(text: str, title: str | None = None) -> CategoryResult:
    """Best category/subcategory for ``text`` with a 0-1 confidence score.

    A category is considered only when one of its general keywords appears.
    Within it, subcategories are tried from highest weight down and the first
    one with any keyword match is scored; the highest score across categories
    wins. ``all_issues`` lists the categories seen up to the winning one.
    """
    combined = f"{title} {text}".lower() if title else (text or "").lower()

    best = UNCATEGORIZED.model_copy()
    detected: list[str] = []

    for definition in CATEGORY_DEFINITIONS:
        if not any(kw in combined for kw in definition.keywords):
            continue
        detected.append(definition.name)

        for sub in sorted(definition.subcategories, key=lambda s: s.weight, reverse=True):
            matched = [kw for kw in sub.keywords if kw in combined]
            if not matched:
                continue
            confidence = _confidence(matched, sub.weight)
            if confidence > best.confidence:
                best = CategoryResult(
                    category=definition.name,
                    subcategory=sub.name,
                    confidence=confidence,
                    all_issues=list(dict.fromkeys(detected)),
                    matched_keywords=matched,
                )
            break

    return best


# Ordered from most to least specific; first match wins.
_INTENT_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("make_payment", re.compile(r"how do i pay|where do i send|make a payment|pay my bill", re.I)),
    ("access_account", re.compile(r"can't log in|forgot password|locked out|reset password", re.I)),
    ("request_payoff", re.compile(r"need a payoff|closing soon|refinancing|payoff quote", re.I)),
    ("understand_issue", re.compile(r"why did|what happened|explain|don't understand", re.I)),
    ("missing_information", re.compile(r"didn't receive|never got|missing|haven't received", re.I)),
    ("escalate_issue", re.compile(r"need to speak|talk to supervisor|escalate|complaint", re.I)),
    ("check_balance", re.compile(r"what is my balance|account balance|how much do i owe", re.I)),
    ("check_due_date", re.compile(r"when is payment due|payment date|due date", re.I)),
]


def detect_customer_intent(transcript_text: str) -> str:
    """Intent of the first customer statement in a ``customer:/agent:`` transcript."""
    parts = transcript_text.lower().split("customer:")
    statements = [part.split("agent:")[0].strip() for part in parts[1:]]
    if not statements:
        return "other"

    first = statements[0]
    for intent, pattern in _INTENT_PATTERNS:
        if pattern.search(first):
            return intent
    return "other"


def detect_all_issues(text: str) -> list[str]:
    """Every category whose general keywords appear in ``text``."""
    lowered = text.lower()
    issues = [
        definition.name
        for definition in CATEGORY_DEFINITIONS
        if any(kw in lowered for kw in definition.keywords)
    ]
    return issues or ["General Inquiry"]


def get_all_categories() -> list[CategoryTree]:
    return [
        CategoryTree(category=d.name, subcategories=[s.name for s in d.subcategories])
        for d in CATEGORY_DEFINITIONS
    ]
