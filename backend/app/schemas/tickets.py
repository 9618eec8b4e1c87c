"""Pydantic models for helpdesk ticket records and the ticket dashboard."""

from datetime import UTC, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Severity = Literal["critical", "warning", "normal", "good"]
SortField = Literal[
    "key", "title", "status", "priority", "project", "assignee", "created", "resolutionTime"
]

_TRUTHY = {"true", "1", "yes"}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TicketRecord(BaseModel):
    """
    One row of the helpdesk ticket export.

    Field names follow the export/database columns so rows can be validated
    directly from JSON files or Supabase responses.
    """
    ticket_key: Optional[str] = None
    ticket_uuid: Optional[str] = None
    ticket_title: Optional[str] = None
    ticket_description: Optional[str] = None
    ticket_status: Optional[str] = None
    ticket_priority: Optional[str] = None
    ticket_type: Optional[str] = None
    project_name: Optional[str] = None
    assigned_user_name: Optional[str] = None
    assigned_user_email: Optional[str] = None
    ticket_created_at_utc: Optional[datetime] = None
    ticket_completed_at_utc: Optional[datetime] = None
    time_to_first_response_in_minutes: Optional[float] = None
    time_to_resolution_in_minutes: Optional[float] = None
    is_ticket_complete: bool = False
    ticket_tags: Optional[str] = None

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: (None if isinstance(v, str) and not v.strip() else v)
                for k, v in data.items()
            }
        return data

    @field_validator("is_ticket_complete", mode="before")
    @classmethod
    def _parse_complete(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in _TRUTHY

    @field_validator("ticket_created_at_utc", "ticket_completed_at_utc")
    @classmethod
    def _ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


# ── Dashboard (/api/stats) ───────────────────────────────────────────


class TicketStats(BaseModel):
    total_tickets: int
    completed_tickets: int
    open_tickets: int
    avg_response_time_minutes: int
    avg_resolution_time_minutes: int
    completion_rate: int


class MonthCount(BaseModel):
    date: str
    count: int


class ProjectBreakdown(BaseModel):
    project: str
    total: int
    completed: int
    open: int
    open_rate: int
    avg_resolution_hours: int


class AssigneeBreakdown(BaseModel):
    email: str
    name: str
    total: int
    completed: int
    open: int
    open_rate: int
    avg_resolution_hours: int


class NameValue(BaseModel):
    name: str
    value: int


class HeatmapCell(BaseModel):
    x: str
    y: str
    value: int


class Heatmap(BaseModel):
    data: list[HeatmapCell]
    x_labels: list[str]
    y_labels: list[str]


class Heatmaps(BaseModel):
    day_hour: Heatmap
    project_status: Heatmap


class Issue(BaseModel):
    category: str
    metric: str
    value: int
    severity: Severity
    description: Optional[str] = None


class DayCount(BaseModel):
    day: str
    count: int


class HourCount(BaseModel):
    hour: str
    count: int


class VolumeTrends(BaseModel):
    volume_by_day_of_week: list[DayCount]
    peak_hours: list[HourCount]
    projects_at_risk: int
    overloaded_assignees: int


class DashboardStats(BaseModel):
    """Payload for GET /api/stats."""
    stats: TicketStats
    tickets_by_month: list[MonthCount]
    project_breakdown: list[ProjectBreakdown]
    assignee_breakdown: list[AssigneeBreakdown]
    status_breakdown: list[NameValue]
    priority_breakdown: list[NameValue]
    heatmaps: Heatmaps
    issues: list[Issue]
    trends: VolumeTrends


# ── Ticket table (/api/tickets) ──────────────────────────────────────


class TicketRow(BaseModel):
    """Flattened ticket as rendered by the ticket table."""
    key: Optional[str] = None
    title: str
    status: str
    priority: str
    project: str
    assignee: str
    category: str
    created: str
    response_time: Optional[float] = None
    resolution_time: Optional[float] = None
    complete: bool


class TicketQuery(BaseModel):
    """Filter, sort and pagination options for the ticket table."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=100, ge=1, le=500)
    search: str = ""
    statuses: list[str] = []
    projects: list[str] = []
    priorities: list[str] = []
    assignees: list[str] = []
    category: str = ""
    sort_field: SortField = "created"
    sort_order: Literal["asc", "desc"] = "desc"

    @field_validator("statuses", "projects", "priorities", mode="before")
    @classmethod
    def _split_commas(cls, value: Any) -> Any:
        """Accept ``New,Assigned`` as well as repeated parameters.

        Assignees are never split: names are stored as ``Last, First``.
        """
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [part.strip() for item in value for part in str(item).split(",") if part.strip()]
        return value


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class FilterOptions(BaseModel):
    statuses: list[str]
    projects: list[str]
    priorities: list[str]
    assignees: list[str]
    categories: list[str] = []


class TicketListResponse(BaseModel):
    tickets: list[TicketRow]
    pagination: Pagination
    filter_options: Optional[FilterOptions] = None


class GroupRequest(BaseModel):
    group_by: str = "project"


class GroupRow(BaseModel):
    name: str
    count: int
    completed: int
    avg_resolution: int
    completion_rate: int


class GroupResponse(BaseModel):
    groups: list[GroupRow]


# ── Burndown ─────────────────────────────────────────────────────────


class BurndownPoint(BaseModel):
    date: str
    total: int
    remaining: int
    completed: int
    ideal: int
    critical_open: int
    high_open: int


class PriorityWork(BaseModel):
    count: int = 0
    points: int = 0


class WorkStats(BaseModel):
    total_open: int
    total_points: int
    by_priority: dict[str, PriorityWork]


class BurndownResponse(BaseModel):
    series: list[BurndownPoint]
    open_tickets: list[TicketRow]
    work: WorkStats
    velocity: float
    estimated_days_to_clear: Optional[int] = None


# ── Advanced charts ──────────────────────────────────────────────────


class ScatterPoint(BaseModel):
    x: float
    y: float
    key: Optional[str] = None
    title: str
    priority: str
    status: str
    category: str
    project: str
    assignee: str


class ProjectWorkload(BaseModel):
    project: str
    total: int
    critical: int
    high: int
    medium: int
    low: int
    avg_resolution: float


class MatrixCell(BaseModel):
    priority: str
    status: str
    count: int


class AssigneeRadar(BaseModel):
    assignee: str
    volume: int
    avg_response: float
    avg_resolution: float
    completion_rate: float
    volume_score: int
    fast_response_score: int
    fast_resolution_score: int


class AdvancedChartsResponse(BaseModel):
    scatter: list[ScatterPoint]
    project_workload: list[ProjectWorkload]
    category_distribution: list[NameValue]
    priority_status_matrix: list[MatrixCell]
    assignee_radar: list[AssigneeRadar]
