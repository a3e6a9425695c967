"""FastAPI application factory."""

import logging
from dataclasses import asdict
from datetime import date
from uuid import UUID, uuid4

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from budget_tracker.api.coach import router as coach_router
from budget_tracker.api.models import CheatDayRequest, MealLogRequest
from budget_tracker.app_logging import configure_logging
from budget_tracker.containers import AppContainer
from budget_tracker.domain.errors import (
    AlreadyExtended,
    BudgetEngineError,
    InsufficientBudget,
    InvalidBaselineTransition,
    InvalidInput,
    NoActiveBaseline,
    NoProfile,
    NotFound,
)
from budget_tracker.domain.meals import MealLogEntry

_ERROR_STATUS: dict[type[BudgetEngineError], int] = {
    InvalidInput: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFound: status.HTTP_404_NOT_FOUND,
    NoProfile: status.HTTP_404_NOT_FOUND,
    NoActiveBaseline: status.HTTP_409_CONFLICT,
    AlreadyExtended: status.HTTP_409_CONFLICT,
    InvalidBaselineTransition: status.HTTP_409_CONFLICT,
    InsufficientBudget: status.HTTP_409_CONFLICT,
}


async def require_user(x_user_id: UUID | None = Header(default=None)) -> UUID:
    """Return the caller's user id set by the upstream gateway."""
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(coach_router)

    @app.exception_handler(BudgetEngineError)
    async def engine_error_handler(
        request: Request, exc: BudgetEngineError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info(
            "Request rejected: path=%s error=%s", request.url.path, exc.code
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "detail": str(exc)},
        )

    def _today(request: Request, user_id: UUID) -> date:
        state_container: AppContainer = request.app.state.container
        return state_container.profile_service.today_for(
            user_id, state_container.clock()
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meal-logs", status_code=status.HTTP_201_CREATED)
    async def create_meal_log(
        payload: MealLogRequest,
        request: Request,
        user_id: UUID = Depends(require_user),
    ) -> dict[str, object]:
        """Log a meal and return the updated daily summary."""
        return _store_meal_log(request, user_id, uuid4(), payload, existing=False)

    @app.put("/meal-logs/{entry_id}")
    async def edit_meal_log(
        entry_id: UUID,
        payload: MealLogRequest,
        request: Request,
        user_id: UUID = Depends(require_user),
    ) -> dict[str, object]:
        """Replace a meal log entry and return the updated daily summary."""
        return _store_meal_log(request, user_id, entry_id, payload, existing=True)

    def _store_meal_log(
        request: Request,
        user_id: UUID,
        entry_id: UUID,
        payload: MealLogRequest,
        *,
        existing: bool,
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        entry = MealLogEntry(
            id=entry_id,
            user_id=user_id,
            log_date=payload.log_date,
            meal_type=payload.meal_type,
            calories=payload.calories,
            protein_g=payload.protein_g,
            carbs_g=payload.carbs_g,
            fat_g=payload.fat_g,
            created_at=state_container.clock(),
            food_name=payload.food_name,
        )
        summary = state_container.aggregator_service.upsert_meal_log(
            entry, _today(request, user_id), require_existing=existing
        )
        return {"entry": _serialize(entry), "summary": _serialize(summary)}

    @app.delete("/meal-logs/{entry_id}")
    async def delete_meal_log(
        entry_id: UUID, request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Delete a meal log entry and return the updated daily summary."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.aggregator_service.delete_meal_log(
            user_id, entry_id, _today(request, user_id)
        )
        return {"summary": _serialize(summary)}

    @app.get("/daily-summaries/{summary_date}")
    async def daily_summary(
        summary_date: date, request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return the totals for one date."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.aggregator_service.get_summary(
            user_id, summary_date
        )
        return {"summary": _serialize(summary)}

    @app.get("/baseline")
    async def baseline_status(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return the phase and progress of the baseline window."""
        state_container: AppContainer = request.app.state.container
        result = state_container.baseline_service.status(
            user_id, _today(request, user_id)
        )
        return {"baseline": _serialize(result)}

    @app.post("/baseline/start")
    async def start_baseline(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Open the baseline window today."""
        state_container: AppContainer = request.app.state.container
        state = state_container.baseline_service.start(
            user_id, _today(request, user_id)
        )
        return {"baseline": _serialize(state)}

    @app.post("/baseline/extend")
    async def extend_baseline(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Extend an elapsed baseline window once."""
        state_container: AppContainer = request.app.state.container
        state = state_container.baseline_service.extend(
            user_id, _today(request, user_id)
        )
        return {"baseline": _serialize(state)}

    @app.post("/baseline/restart")
    async def restart_baseline(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Start the baseline window over from today."""
        state_container: AppContainer = request.app.state.container
        state = state_container.baseline_service.restart(
            user_id, _today(request, user_id)
        )
        return {"baseline": _serialize(state)}

    @app.post("/baseline/complete")
    async def complete_baseline(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Finish the baseline and open the first weekly period."""
        state_container: AppContainer = request.app.state.container
        completion = state_container.baseline_service.complete_now(
            user_id, _today(request, user_id)
        )
        return _serialize(completion)

    @app.post("/budget/recalculate")
    async def recalculate_budget(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return the current weekly period, seeding or rolling it as needed."""
        state_container: AppContainer = request.app.state.container
        result = state_container.budget_service.recalculate(
            user_id, _today(request, user_id)
        )
        return _serialize(result)

    @app.get("/weekly-periods/current")
    async def current_period(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return the weekly period covering today."""
        state_container: AppContainer = request.app.state.container
        period = state_container.budget_service.current_period(
            user_id, _today(request, user_id)
        )
        if period is None:
            raise NoActiveBaseline("No weekly period has been opened yet")
        return {"period": _serialize(period)}

    @app.get("/weekly-metrics/current")
    async def current_metrics(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return the scores of the weekly period covering today."""
        state_container: AppContainer = request.app.state.container
        today = _today(request, user_id)
        period = state_container.budget_service.current_period(user_id, today)
        if period is None:
            raise NoActiveBaseline("No weekly period has been opened yet")
        metrics = state_container.score_service.refresh(period, today)
        return {
            "period": _serialize(period),
            "metrics": _serialize(metrics) if metrics else None,
        }

    @app.post("/cheat-days", status_code=status.HTTP_201_CREATED)
    async def reserve_cheat_day(
        payload: CheatDayRequest,
        request: Request,
        user_id: UUID = Depends(require_user),
    ) -> dict[str, object]:
        """Reserve calories for a treat day."""
        state_container: AppContainer = request.app.state.container
        reservation = state_container.cheat_day_service.reserve_cheat_day(
            user_id,
            payload.cheat_date,
            payload.planned_calories,
            _today(request, user_id),
        )
        return _serialize(reservation)

    @app.delete("/cheat-days/{cheat_date}")
    async def cancel_cheat_day(
        cheat_date: date, request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, str]:
        """Release a treat-day reservation."""
        state_container: AppContainer = request.app.state.container
        state_container.cheat_day_service.cancel_cheat_day(
            user_id, cheat_date, _today(request, user_id)
        )
        return {"status": "ok"}

    @app.get("/cheat-days/allowance")
    async def cheat_day_allowance(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return what each remaining regular day may use."""
        state_container: AppContainer = request.app.state.container
        allowance = state_container.cheat_day_service.daily_allowance(
            user_id, _today(request, user_id)
        )
        return _serialize(allowance)

    @app.get("/cheat-days/recommendations")
    async def cheat_day_recommendations(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Suggest treat-day sizes for the current period."""
        state_container: AppContainer = request.app.state.container
        recommendation, period = state_container.cheat_day_service.recommendations(
            user_id, _today(request, user_id)
        )
        return {
            "recommendation": _serialize(recommendation),
            "period": _serialize(period),
        }

    @app.get("/streak")
    async def streak(
        request: Request, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Return the logging streak as of today."""
        state_container: AppContainer = request.app.state.container
        state = state_container.streak_service.get_streak(
            user_id, _today(request, user_id)
        )
        return {"streak": _serialize(state)}

    return app


def _serialize(value: object) -> dict[str, object]:
    return jsonable_encoder(asdict(value))
