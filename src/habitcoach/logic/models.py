from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Literal, Optional, Union
from datetime import date
import re

Mood = Literal["stressed", "happy", "sad", "bored", "anxious", "neutral"]
EatingTrigger = Literal["hunger", "emotion", "social", "habit", "craving"]
CheckinMood = Literal["great", "good", "okay", "stressed", "low"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class CamelModel(BaseModel):
    """Derived records serialize with camelCase keys, as the mobile client expects."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- LOGGED DATA (read-only snapshot from the storage layer) ---

class FoodEntry(BaseModel):
    name: str
    grams: float = Field(default=0.0, ge=0.0)
    calories: float = Field(default=0.0, ge=0.0)
    protein_g: float = Field(default=0.0, ge=0.0)
    carbs_g: float = Field(default=0.0, ge=0.0)
    fats_g: float = Field(default=0.0, ge=0.0)

    # Only present when captured through the mindful check-in flow
    hunger_level: Optional[int] = Field(default=None, ge=1, le=5, description="1 = not hungry, 5 = very hungry")
    mood_before: Optional[Mood] = None
    eating_trigger: Optional[EatingTrigger] = None
    mindful_rating: Optional[int] = Field(default=None, ge=1, le=5)
    satisfaction_level: Optional[int] = Field(default=None, ge=1, le=5)


class WorkoutEntry(BaseModel):
    name: str
    duration_min: float = Field(default=0.0, ge=0.0)
    calories_burned: float = Field(default=0.0, ge=0.0)


class MoodCheckins(BaseModel):
    morning: Optional[CheckinMood] = None
    evening: Optional[CheckinMood] = None


class Reflection(BaseModel):
    wins: Optional[str] = None
    challenges: Optional[str] = None
    tomorrow_focus: Optional[str] = None


class CoachActionRecord(BaseModel):
    done: bool = False
    completed_at: Optional[str] = None


class DailyLog(BaseModel):
    meals: Dict[str, List[FoodEntry]] = Field(default_factory=dict)
    workout_entries: List[WorkoutEntry] = Field(default_factory=list)
    water_ml: float = Field(default=0.0, ge=0.0)
    daily_habits: Dict[str, bool] = Field(default_factory=dict)
    mood_checkins: MoodCheckins = Field(default_factory=MoodCheckins)
    reflection: Reflection = Field(default_factory=Reflection)
    habit_streak: Dict[str, int] = Field(default_factory=dict)
    coach_actions: Optional[Dict[str, CoachActionRecord]] = None

    def all_entries(self) -> List[FoodEntry]:
        """Flatten every meal into one list, keeping meal order then entry order."""
        return [entry for entries in self.meals.values() for entry in entries]

    def total_calories(self) -> float:
        return sum(entry.calories for entry in self.all_entries())


class NutritionGoals(BaseModel):
    """Daily targets"""
    calories: float = Field(default=2000.0, ge=0.0)
    protein_g: float = Field(default=120.0, ge=0.0)
    carbs_g: float = Field(default=200.0, ge=0.0)
    fats_g: float = Field(default=65.0, ge=0.0)
    water_ml: float = Field(default=2000.0, ge=0.0)


class Goal(BaseModel):
    """User-defined goal. `target` is a bare number or a small dict depending on `type`:
    weight -> 72.5 or {"value": 72.5}, nutrition -> {"calories": 1900},
    habit -> {"habitId": "eat_slowly", "minDays": 7}.
    """
    id: str
    type: Literal["weight", "habit", "nutrition"]
    target: Union[float, Dict[str, Any]]
    start_date: str
    end_date: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class UserProfile(BaseModel):
    name: str = Field(default="User", description="User's display name")
    age: int = Field(default=30, ge=13, le=120, description="Age must be between 13-120")
    sex: Literal["male", "female"] = "female"
    height_cm: float = Field(default=170.0, ge=100, le=250, description="Height must be between 100-250cm")
    weight_kg: float = Field(default=70.0, ge=30.0, le=300.0)
    start_weight_kg: float = Field(default=70.0, ge=30.0, le=300.0)
    goal_weight_kg: float = Field(default=70.0, ge=30.0, le=300.0)
    activity_level: ActivityLevel = "moderate"
    goals: NutritionGoals = Field(default_factory=NutritionGoals)
    eating_triggers: List[str] = Field(default_factory=list)
    problem_foods: List[str] = Field(default_factory=list)
    preferred_habits: List[str] = Field(default_factory=list)
    motivation_reason: str = ""
    goals_list: List[Goal] = Field(default_factory=list)


class AppData(BaseModel):
    profile: UserProfile = Field(default_factory=UserProfile)
    daily_logs: Dict[str, DailyLog] = Field(default_factory=dict)
    weight_logs: Dict[str, float] = Field(default_factory=dict)

    @field_validator('daily_logs', 'weight_logs')
    def validate_date_keys(cls, v):
        for key in v:
            if not ISO_DATE_PATTERN.fullmatch(key):
                raise ValueError(f"Log keys must be YYYY-MM-DD dates, got {key!r}")
            date.fromisoformat(key)  # rejects impossible dates such as 2024-02-30
        return v


# --- DERIVED OUTPUTS ---

class MovingAverage(CamelModel):
    window: int
    value: float


class WeightTrend(CamelModel):
    slope: float
    intercept: float


class ForecastPoint(CamelModel):
    date: str
    value: float


class AnalyticsSummary(CamelModel):
    calories_moving_average: List[MovingAverage]
    mindfulness_moving_average: List[MovingAverage]
    weight_trend: Optional[WeightTrend] = None
    weight_forecast: List[ForecastPoint] = Field(default_factory=list)
    last_updated: str


class BehavioralInsight(BaseModel):
    type: Literal["pattern", "achievement", "suggestion", "warning"]
    title: str
    message: str
    actionable_tip: Optional[str] = None
    related_data: Optional[Dict[str, Any]] = None


class TriggerAnalysis(BaseModel):
    trigger: str
    frequency: int
    associated_foods: List[str]
    suggested_alternatives: List[str]


class HabitCoachingTip(BaseModel):
    id: str
    title: str
    description: str
    category: Literal["mindful_eating", "emotional_eating", "portion_control", "meal_timing", "stress_management"]
    difficulty: Literal["beginner", "intermediate", "advanced"]


class CoachAnalysis(CamelModel):
    lookback_days: int
    logging_consistency: float = 0.0  # 0-1
    avg_mindfulness: float = 0.0  # 0-5
    calorie_std_dev: float = 0.0
    evening_snack_percent: float = 0.0
    emotion_trigger_percent: float = 0.0
    hunger_mismatch_percent: float = 0.0  # low hunger + high calories
    hydration_ratio: float = 0.0  # water avg / goal
    protein_ratio: float = 0.0  # protein avg / goal
    persona_tags: List[str] = Field(default_factory=list)


class CoachAction(CamelModel):
    id: str
    label: str
    description: str
    focus_area: str
    impact: Literal["low", "medium", "high"]
    recommended_for: List[str] = Field(alias="recommended_for")
    done: Optional[bool] = None


class CoachAdvice(CamelModel):
    focus_area: str
    message: str
    rationale: str
    persona_tags: List[str]
    actions: List[CoachAction]
    generated_at: str


class GoalRecommendation(CamelModel):
    goal_id: str
    status: Literal["on_track", "behind", "completed", "at_risk"]
    message: str
    recommended_adjustment: Optional[str] = None


class HabitProgress(CamelModel):
    completed_count: int
    total_habits: int
    completion_percent: float
    longest_streak: int


class MacroGoals(BaseModel):
    """Daily macro targets derived from the profile"""
    calories: int
    protein_g: int
    carbs_g: int
    fats_g: int
