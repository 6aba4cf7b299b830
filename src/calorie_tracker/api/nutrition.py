"""Nutrition summary endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from calorie_tracker.api.dependencies import current_user_id
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.reports import DailyNutrition, PeriodNutrition

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


@router.get("/daily")
async def daily(
    request: Request,
    day: date = Query(alias="date"),
    user_id: UUID = Depends(current_user_id),
) -> DailyNutrition:
    """Return the caller's totals for one day."""
    container: AppContainer = request.app.state.container
    return await container.report_service.get_daily(user_id, day)


@router.get("/weekly")
async def weekly(
    request: Request,
    start_date: date,
    end_date: date,
    user_id: UUID = Depends(current_user_id),
) -> PeriodNutrition:
    """Return a per-day series over an inclusive range."""
    container: AppContainer = request.app.state.container
    return await container.report_service.get_weekly(user_id, start_date, end_date)


@router.get("/monthly")
async def monthly(
    request: Request,
    month: int,
    year: int,
    user_id: UUID = Depends(current_user_id),
) -> PeriodNutrition:
    """Return a per-day series for a calendar month."""
    container: AppContainer = request.app.state.container
    return await container.report_service.get_monthly(user_id, month, year)
