"""Statistics service - period aggregation, chart series and yearly financials."""

import calendar
import math
from collections.abc import Iterable
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.lesson import Lesson, LessonStatus
from app.models.settings import FALLBACK_COLOR, AppSettings
from app.models.student import UNKNOWN_STUDENT_NAME, Student
from app.schemas.lesson import LessonResponse
from app.schemas.statistics import (
    ChartPoint,
    DashboardSummary,
    FinancialReport,
    PeriodStatistics,
    StudentStats,
    SubjectStats,
    TopicStats,
    TopTopic,
    WeekSummary,
)
from app.services import lesson as lesson_service
from app.services import student as student_service
from app.services.tax import tax_burden_for_year
from app.utils.pluralize import (
    HOUR_FORMS,
    LESSON_FORMS,
    TIME_FORMS,
    pluralize,
    pluralize_with_number,
)

PERIODS = ("week", "month", "quarter", "year")
TOP_LIMIT = 10


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + day.month - 1 - months
    year, month = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def get_period_dates(period: str, today: date | None = None) -> tuple[date, date]:
    """
    Inclusive date window for a preset ending today.

    ``week`` covers the last 7 days, ``month``/``quarter``/``year`` go back
    1/3/12 calendar months. Unknown presets fall back to ``month``.
    """
    if today is None:
        today = date.today()

    if period == "week":
        return today - timedelta(days=7), today
    if period == "quarter":
        return _months_back(today, 3), today
    if period == "year":
        return _months_back(today, 12), today
    return _months_back(today, 1), today


def aggregate_lessons(
    lessons: Iterable[Lesson],
    students: dict[int, Student],
    date_from: date,
    date_to: date,
) -> PeriodStatistics:
    """
    Single pass over lessons building totals and per-subject/student/topic stats.

    Only completed lessons count. Buckets are created on first sight, so
    their order follows the order of ``lessons``.
    """
    total_lessons = 0
    total_hours = 0.0
    total_earnings = 0
    paid_amount = 0
    subject_stats: dict[str, SubjectStats] = {}
    student_stats: dict[int, StudentStats] = {}
    topic_stats: dict[str, TopicStats] = {}

    for lesson in lessons:
        if lesson.status != LessonStatus.COMPLETED:
            continue

        hours = lesson.hours
        price = lesson.price or 0

        subject = subject_stats.setdefault(lesson.subject, SubjectStats())
        subject.count += 1
        subject.hours += hours
        subject.earnings += price

        if lesson.student_id not in student_stats:
            student = students.get(lesson.student_id)
            student_stats[lesson.student_id] = StudentStats(
                name=student.name if student else UNKNOWN_STUDENT_NAME
            )
        student_bucket = student_stats[lesson.student_id]
        student_bucket.count += 1
        student_bucket.hours += hours
        student_bucket.earnings += price

        if lesson.topic:
            topic = topic_stats.setdefault(lesson.topic, TopicStats(subject=lesson.subject))
            topic.count += 1

        total_lessons += 1
        total_hours += hours
        total_earnings += price
        if lesson.is_paid:
            paid_amount += price

    return PeriodStatistics(
        date_from=date_from,
        date_to=date_to,
        total_lessons=total_lessons,
        total_hours=total_hours,
        total_earnings=total_earnings,
        paid_amount=paid_amount,
        unpaid_amount=total_earnings - paid_amount,
        subject_stats=subject_stats,
        student_stats=student_stats,
        topic_stats=topic_stats,
        summary=(
            f"{pluralize_with_number(total_lessons, LESSON_FORMS)}, "
            f"{_hours_text(total_hours)}"
        ),
    )


def _hours_text(hours: float) -> str:
    rounded = math.floor(hours + 0.5)
    return f"{rounded} {pluralize(rounded, HOUR_FORMS)}"


async def get_statistics_for_period(
    db: AsyncSession,
    date_from: date,
    date_to: date,
) -> PeriodStatistics:
    """Aggregate completed lessons dated within [date_from, date_to]."""
    lessons = await lesson_service.get_lessons_by_date_range(
        db, date_from, date_to, status=LessonStatus.COMPLETED
    )
    students = {s.id: s for s in await student_service.get_students(db)}
    return aggregate_lessons(lessons, students, date_from, date_to)


# ============== Derived Views ==============


def top_topics(stats: PeriodStatistics, limit: int = TOP_LIMIT) -> list[TopTopic]:
    """Most frequent topics; ties keep first-seen order."""
    ranked = sorted(stats.topic_stats.items(), key=lambda item: item[1].count, reverse=True)
    return [
        TopTopic(
            topic=topic,
            count=topic_stat.count,
            subject=topic_stat.subject,
            times=f"{topic_stat.count} {pluralize(topic_stat.count, TIME_FORMS)}",
        )
        for topic, topic_stat in ranked[:limit]
    ]


def subjects_chart(stats: PeriodStatistics, app_settings: AppSettings | None) -> list[ChartPoint]:
    """Lesson count per subject, labelled with subject names."""
    points = []
    for subject_id, subject_stat in stats.subject_stats.items():
        subject = app_settings.subject_by_id(subject_id) if app_settings else None
        points.append(ChartPoint(
            label=subject["name"] if subject else subject_id,
            value=subject_stat.count,
            color=subject["color"] if subject else FALLBACK_COLOR,
        ))
    return points


def students_chart(
    stats: PeriodStatistics,
    students: dict[int, Student],
    limit: int = TOP_LIMIT,
) -> list[ChartPoint]:
    """Hours per student for the ``limit`` students with the lowest ids."""
    points = []
    ranked = sorted(stats.student_stats.items(), key=lambda item: item[0])
    for student_id, student_stat in ranked[:limit]:
        student = students.get(student_id)
        points.append(ChartPoint(
            label=student_stat.name,
            value=student_stat.hours,
            color=(student.color if student and student.color else FALLBACK_COLOR),
        ))
    return points


# ============== Financials ==============


async def get_financials(
    db: AsyncSession,
    year: int,
    app_settings: AppSettings,
) -> FinancialReport:
    """Earnings, cash received, tax burden and net income for a calendar year."""
    stats = await get_statistics_for_period(db, date(year, 1, 1), date(year, 12, 31))
    tax = tax_burden_for_year(app_settings, stats.total_earnings, year)

    return FinancialReport(
        year=year,
        lessons_count=stats.total_lessons,
        total_earnings=stats.total_earnings,
        paid_amount=stats.paid_amount,
        unpaid_amount=stats.unpaid_amount,
        tax=tax,
        net_income=stats.paid_amount - tax.total,
    )


# ============== Dashboard ==============


def current_week(today: date | None = None) -> tuple[date, date]:
    """Monday..Sunday of the week containing ``today``."""
    if today is None:
        today = date.today()
    week_start = today - timedelta(days=today.weekday())
    return week_start, week_start + timedelta(days=6)


async def get_week_summary(db: AsyncSession, today: date | None = None) -> WeekSummary:
    """Planned (not cancelled) versus completed lessons this week."""
    week_start, week_end = current_week(today)
    lessons = await lesson_service.get_lessons_by_date_range(db, week_start, week_end)

    planned = [l for l in lessons if l.status != LessonStatus.CANCELLED]
    completed = [l for l in planned if l.status == LessonStatus.COMPLETED]
    planned_hours = sum(l.hours for l in planned)
    completed_hours = sum(l.hours for l in completed)

    return WeekSummary(
        week_start=week_start,
        week_end=week_end,
        planned_count=len(planned),
        planned_hours=planned_hours,
        completed_count=len(completed),
        completed_hours=completed_hours,
        planned_text=f"{pluralize_with_number(len(planned), LESSON_FORMS)} ({_hours_text(planned_hours)})",
        completed_text=f"{pluralize_with_number(len(completed), LESSON_FORMS)} ({_hours_text(completed_hours)})",
    )



async def get_dashboard(db: AsyncSession, today: date | None = None) -> DashboardSummary:
    """Today's lessons, the next scheduled ones, unpaid lessons and the week summary."""
    if today is None:
        today = date.today()

    unpaid = await lesson_service.get_unpaid_lessons(db)
    return DashboardSummary(
        today=[LessonResponse.model_validate(l) for l in await lesson_service.get_today_lessons(db, today)],
        upcoming=[LessonResponse.model_validate(l) for l in await lesson_service.get_upcoming_lessons(db)],
        unpaid=[LessonResponse.model_validate(l) for l in unpaid],
        unpaid_total=sum(l.price or 0 for l in unpaid),
        week=await get_week_summary(db, today),
    )
