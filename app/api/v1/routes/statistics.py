"""Statistics and dashboard routes."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import CurrentSettings, DbSession
from app.schemas.statistics import DashboardSummary, FinancialReport, PeriodReport
from app.services import statistics as statistics_service
from app.services import student as student_service

router = APIRouter(tags=["Statistics"])


@router.get("/statistics", response_model=PeriodReport)
async def get_period_report(
    db: DbSession,
    app_settings: CurrentSettings,
    period: str = Query("month", description="week, month, quarter or year"),
    date_from: date | None = Query(None, description="Custom range start, inclusive"),
    date_to: date | None = Query(None, description="Custom range end, inclusive"),
) -> PeriodReport:
    """
    Statistics over completed lessons.

    A custom ``date_from``/``date_to`` range overrides ``period``.
    """
    if (date_from is None) != (date_to is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from and date_to must be given together",
        )

    if date_from is not None:
        if date_to < date_from:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="date_to must be after date_from",
            )
        period = "custom"
    else:
        if period not in statistics_service.PERIODS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"period must be one of {', '.join(statistics_service.PERIODS)}",
            )
        date_from, date_to = statistics_service.get_period_dates(period)

    stats = await statistics_service.get_statistics_for_period(db, date_from, date_to)
    students = {s.id: s for s in await student_service.get_students(db)}

    return PeriodReport(
        period=period,
        statistics=stats,
        subjects_chart=statistics_service.subjects_chart(stats, app_settings),
        students_chart=statistics_service.students_chart(stats, students),
        top_topics=statistics_service.top_topics(stats),
    )


@router.get("/statistics/financials", response_model=FinancialReport)
async def get_financials(
    db: DbSession,
    app_settings: CurrentSettings,
    year: int | None = Query(None, ge=2000, le=2100, description="Defaults to current year"),
) -> FinancialReport:
    """Yearly earnings, tax burden and net income."""
    if year is None:
        year = date.today().year
    return await statistics_service.get_financials(db, year, app_settings)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(db: DbSession) -> DashboardSummary:
    """Start page summary."""
    return await statistics_service.get_dashboard(db)
