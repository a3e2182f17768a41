"""
Shared fixtures. Everything is built in memory; the analytics core never touches storage.
"""
from datetime import date, timedelta

import pytest

from habitcoach.logic.models import AppData, DailyLog, FoodEntry, NutritionGoals, UserProfile


@pytest.fixture
def entry():
    """Factory for food entries: entry("Chips", 250, eating_trigger="emotion")."""
    def _make(name="Oatmeal", calories=300, **fields):
        return FoodEntry(name=name, calories=calories, **fields)
    return _make


@pytest.fixture
def day_log():
    """Factory for daily logs. Meals default to a single Breakfast list."""
    def _make(entries=None, meal="Breakfast", **fields):
        meals = fields.pop("meals", None)
        if meals is None:
            meals = {meal: list(entries or [])}
        return DailyLog(meals=meals, **fields)
    return _make


@pytest.fixture
def date_range():
    """ISO dates for `n` consecutive days starting at `start`."""
    def _make(n, start=date(2024, 1, 1)):
        return [(start + timedelta(days=i)).isoformat() for i in range(n)]
    return _make


@pytest.fixture
def profile():
    return UserProfile(
        name="Sam",
        age=30,
        sex="female",
        height_cm=170,
        weight_kg=70,
        start_weight_kg=78,
        goal_weight_kg=65,
        activity_level="moderate",
        goals=NutritionGoals(calories=1900, protein_g=100, carbs_g=200, fats_g=60, water_ml=2000),
    )


@pytest.fixture
def app_data(profile):
    def _make(daily_logs=None, weight_logs=None, **profile_updates):
        p = profile.model_copy(update=profile_updates) if profile_updates else profile
        return AppData(profile=p, daily_logs=daily_logs or {}, weight_logs=weight_logs or {})
    return _make
