"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

import httpx
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from food_track.api.models import DraftFoodRequest, GoalRequest, SaveMealRequest
from food_track.app_logging import configure_logging
from food_track.containers import AppContainer
from food_track.domain.dates import date_key, parse_date_key
from food_track.domain.errors import (
    DuplicateMealError,
    FoodLookupError,
    FoodTrackError,
    MealNotFoundError,
    StorageError,
)
from food_track.domain.meals import DaySummary, MealSummary
from food_track.domain.nutrition import Food
from food_track.services.nutrition import food_nutrition, foods_totals


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(FoodTrackError)
    async def handle_domain_error(
        request: Request, exc: FoodTrackError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_status_for_error(exc), content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(request: Request, q: str = "") -> dict[str, object]:
        """Search the open food database."""
        state_container: AppContainer = request.app.state.container
        try:
            foods = await state_container.food_lookup_service.search(q)
        except (httpx.HTTPError, FoodLookupError) as exc:
            logger.exception("Food search failed", extra={"query": q})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Food search failed",
            ) from exc
        return {"foods": [asdict(food) for food in foods]}

    @app.get("/foods/barcode/{barcode}")
    async def food_by_barcode(barcode: str, request: Request) -> dict[str, object]:
        """Look up a scanned barcode."""
        state_container: AppContainer = request.app.state.container
        try:
            food = await state_container.food_lookup_service.get_by_barcode(barcode)
        except (httpx.HTTPError, FoodLookupError) as exc:
            logger.exception("Barcode lookup failed", extra={"barcode": barcode})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Barcode lookup failed",
            ) from exc
        if food is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
            )
        return {"food": asdict(food)}

    @app.get("/draft")
    async def get_draft(request: Request) -> dict[str, object]:
        """Return the meal being composed."""
        state_container: AppContainer = request.app.state.container
        return _draft_payload(state_container.meal_service.get_draft())

    @app.post("/draft/foods")
    async def add_draft_food(
        payload: DraftFoodRequest, request: Request
    ) -> dict[str, object]:
        """Add a food with its quantity to the meal being composed."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.meal_service.add_to_draft(
            payload.food.to_food(), payload.quantity
        )
        return _draft_payload(foods)

    @app.delete("/draft/foods/{food_id}")
    async def remove_draft_food(food_id: str, request: Request) -> dict[str, object]:
        """Remove a food from the meal being composed."""
        state_container: AppContainer = request.app.state.container
        return _draft_payload(state_container.meal_service.remove_from_draft(food_id))

    @app.delete("/draft")
    async def clear_draft(request: Request) -> dict[str, object]:
        """Discard the meal being composed."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_service.clear_draft()
        return _draft_payload([])

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def save_meal(payload: SaveMealRequest, request: Request) -> dict[str, object]:
        """Log the meal being composed."""
        state_container: AppContainer = request.app.state.container
        day = _resolve_day(payload.date)
        meal = state_container.meal_service.save_draft(payload.meal_type, day)
        summary = state_container.stats_service.get_meal_summary(meal.id)
        return _meal_payload(summary)

    @app.get("/meals/{meal_id}")
    async def meal_detail(meal_id: str, request: Request) -> dict[str, object]:
        """Return a logged meal with per-food and total nutrition."""
        state_container: AppContainer = request.app.state.container
        return _meal_payload(state_container.stats_service.get_meal_summary(meal_id))

    @app.delete("/meals/{meal_id}")
    async def delete_meal(meal_id: str, request: Request) -> dict[str, str]:
        """Delete a logged meal."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_service.delete_meal(meal_id)
        return {"status": "deleted"}

    @app.get("/days/{day}")
    async def day_summary(day: str, request: Request) -> dict[str, object]:
        """Return the meals, totals and goal progress for a day."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.stats_service.get_day(_resolve_day(day))
        return _day_payload(summary)

    @app.get("/goal")
    async def get_goal(request: Request) -> dict[str, float]:
        """Return the daily calorie goal."""
        state_container: AppContainer = request.app.state.container
        return {"goal": state_container.goal_service.get_goal()}

    @app.put("/goal")
    async def set_goal(payload: GoalRequest, request: Request) -> dict[str, float]:
        """Update the daily calorie goal."""
        state_container: AppContainer = request.app.state.container
        return {"goal": state_container.goal_service.set_goal(payload.goal)}

    return app


def _status_for_error(exc: FoodTrackError) -> int:
    if isinstance(exc, MealNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, DuplicateMealError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, StorageError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, FoodLookupError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def _resolve_day(raw: str | None) -> str:
    if raw is None or raw == "today":
        return date_key(date.today())
    try:
        return date_key(parse_date_key(raw))
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date: {raw}",
        ) from exc


def _food_payload(food: Food) -> dict[str, object]:
    return {**asdict(food), "nutrition": asdict(food_nutrition(food))}


def _draft_payload(foods: list[Food]) -> dict[str, object]:
    return {
        "foods": [_food_payload(food) for food in foods],
        "totals": asdict(foods_totals(foods)),
    }


def _meal_payload(summary: MealSummary) -> dict[str, object]:
    meal = summary.meal
    return {
        "id": meal.id,
        "name": meal.name,
        "date": meal.date,
        "foods": [_food_payload(food) for food in meal.foods],
        "food_count": summary.food_count,
        "totals": asdict(summary.totals),
        "incomplete_food_ids": summary.incomplete_food_ids,
    }


def _day_payload(summary: DaySummary) -> dict[str, object]:
    return {
        "day": summary.day,
        "meals": [_meal_payload(meal) for meal in summary.meals],
        "totals": asdict(summary.totals),
        "calorie_goal": summary.calorie_goal,
        "progress": summary.progress,
        "incomplete_food_ids": summary.incomplete_food_ids,
    }
