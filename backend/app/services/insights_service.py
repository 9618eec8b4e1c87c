"""Free-form AI analysis of the ticket data."""

import logging

from ..core.llm import generate_text
from ..schemas.tickets import TicketRecord
from .metrics import round_int
from .ticket_analytics import assignee_breakdown, compute_ticket_stats, project_breakdown, ticket_sample

logger = logging.getLogger(__name__)

CONTEXT_SAMPLE_SIZE = 50
TITLE_PREVIEW = 60


SYSTEM_PROMPT_TEMPLATE = """You are a helpful data analyst assistant specializing in helpdesk ticket analysis. You have access to the following data about servicing helpdesk tickets. Provide insightful, actionable analysis based on the user's questions.

{context}

When analyzing, focus on:
1. Identifying patterns and trends
2. Highlighting potential issues or bottlenecks
3. Suggesting actionable improvements
4. Being specific with numbers and percentages

Keep your responses concise but informative. Use bullet points and formatting for clarity."""


def build_analysis_context(tickets: list[TicketRecord]) -> str:
    """Summarize stats, top projects, top assignees and a ticket sample as markdown."""
    stats = compute_ticket_stats(tickets)
    projects = project_breakdown(tickets)
    assignees = assignee_breakdown(tickets)
    sample = ticket_sample(tickets, CONTEXT_SAMPLE_SIZE)

    lines = [
        "## Ticket Statistics Overview",
        f"- Total Tickets: {stats.total_tickets:,}",
        f"- Completed Tickets: {stats.completed_tickets:,}",
        f"- Open Tickets: {stats.open_tickets:,}",
        f"- Completion Rate: {stats.completion_rate}%",
        f"- Average Response Time: {stats.avg_response_time_minutes} minutes "
        f"({round_int(stats.avg_response_time_minutes / 60)} hours)",
        f"- Average Resolution Time: {stats.avg_resolution_time_minutes} minutes "
        f"({round_int(stats.avg_resolution_time_minutes / 60)} hours)",
        "",
        "## Project Breakdown (Top 10)",
    ]
    lines += [
        f"- {p.project}: {p.total} total, {p.completed} completed, "
        f"avg resolution: {p.avg_resolution_hours} hours"
        for p in projects
    ]
    lines += ["", "## Top Assignees (Top 15)"]
    lines += [
        f"- {a.name}: {a.total} tickets, {a.completed} completed, "
        f"avg resolution: {a.avg_resolution_hours} hours"
        for a in assignees
    ]
    lines += ["", f"## Sample Tickets ({CONTEXT_SAMPLE_SIZE} recent)"]
    lines += [
        f"- [{t.get('ticket_key')}] {(t.get('ticket_title') or '')[:TITLE_PREVIEW]}... "
        f"| {t.get('ticket_status')} | {t.get('project_name')}"
        for t in sample
    ]
    return "\n".join(lines)


async def analyze(prompt: str, tickets: list[TicketRecord]) -> str:
    """
    Answer an analyst question about the tickets.

    Raises:
        LLMNotConfiguredError: No LLM API key is configured.
        Exception: Any LLM transport or provider error propagates.
    """
    system_prompt = SYSTEM_PROMPT_TEMPLATE.format(context=build_analysis_context(tickets))
    logger.info("Running AI analysis over %d tickets", len(tickets))
    answer = await generate_text(prompt, system_prompt=system_prompt, temperature=0.7, max_tokens=2000)
    return answer or "No analysis generated"
