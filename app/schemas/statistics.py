"""Statistics and financial report schemas."""

from datetime import date

from pydantic import BaseModel, Field

from app.schemas.lesson import LessonResponse


# ============== Period Statistics ==============


class SubjectStats(BaseModel):
    """Completed lessons for one subject."""

    count: int = 0
    hours: float = 0
    earnings: int = 0


class StudentStats(BaseModel):
    """Completed lessons for one student."""

    name: str
    count: int = 0
    hours: float = 0
    earnings: int = 0


class TopicStats(BaseModel):
    """How often a topic was covered."""

    count: int = 0
    subject: str = Field(description="Subject id of the first lesson with this topic")


class PeriodStatistics(BaseModel):
    """Aggregate over completed lessons in a date window."""

    date_from: date
    date_to: date

    total_lessons: int
    total_hours: float
    total_earnings: int = Field(description="Accrued for completed lessons")
    paid_amount: int = Field(description="Actually received")
    unpaid_amount: int

    subject_stats: dict[str, SubjectStats]
    student_stats: dict[int, StudentStats]
    topic_stats: dict[str, TopicStats]

    summary: str = Field(description="Human readable totals, e.g. '5 занятий, 6 часов'")


# ============== Chart Series ==============


class ChartPoint(BaseModel):
    """One labelled value for the charting surface."""

    label: str
    value: float
    color: str


class TopTopic(BaseModel):
    """Topic ranked by number of lessons."""

    topic: str
    count: int
    subject: str
    times: str = Field(description="Pluralized count, e.g. '3 раза'")


class PeriodReport(BaseModel):
    """Period statistics plus the derived views shown on the statistics page."""

    period: str
    statistics: PeriodStatistics
    subjects_chart: list[ChartPoint]
    students_chart: list[ChartPoint]
    top_topics: list[TopTopic]


# ============== Financials ==============


class TaxBurden(BaseModel):
    """Tax and insurance due for a year under the selected regime."""

    regime: str
    tax_amount: int
    insurance_cost: int
    tax_rate: float | None = None
    total: int
    description: str


class FinancialReport(BaseModel):
    """Yearly earnings, taxes and net income."""

    year: int
    lessons_count: int
    total_earnings: int
    paid_amount: int
    unpaid_amount: int
    tax: TaxBurden
    net_income: int = Field(description="Paid amount minus total tax burden")


# ============== Dashboard ==============


class WeekSummary(BaseModel):
    """Current week's planned and completed workload."""

    week_start: date
    week_end: date
    planned_count: int
    planned_hours: float
    completed_count: int
    completed_hours: float
    planned_text: str
    completed_text: str


class DashboardSummary(BaseModel):
    """Everything the start page shows."""

    today: list[LessonResponse]
    upcoming: list[LessonResponse]
    unpaid: list[LessonResponse]
    unpaid_total: int
    week: WeekSummary
