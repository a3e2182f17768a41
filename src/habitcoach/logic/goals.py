import logging
from typing import Any, List, Optional

from habitcoach.logic.analytics import summarize_analytics
from habitcoach.logic.calculations import safe_float
from habitcoach.logic.dates import DateLike
from habitcoach.logic.models import AnalyticsSummary, AppData, Goal, GoalRecommendation

logger = logging.getLogger(__name__)

GOAL_LOOKBACK_DAYS = 30
NUTRITION_TOLERANCE = 0.1
DEFAULT_HABIT_MIN_DAYS = 7

WEIGHT_ADJUSTMENT = "Reduce daily intake by ~200 kcal and re-evaluate in 2 weeks."
NUTRITION_ADJUSTMENT = "Try reducing portion sizes or swapping calorie-dense foods."


def _target_field(goal: Goal, key: str) -> Any:
    return goal.target.get(key) if isinstance(goal.target, dict) else None


def _target_number(goal: Goal, key: str) -> float:
    """Numeric target field; strings are parsed and 0 means not set."""
    return safe_float(_target_field(goal, key))


def evaluate_weight_goal(goal: Goal, data: AppData, summary: AnalyticsSummary) -> GoalRecommendation:
    """
    Compare current weight to the target using the direction of the weight trend.
    No trend counts as a flat slope, which reads as behind unless the target is met.
    """
    current = data.profile.weight_kg
    target = safe_float(goal.target) if isinstance(goal.target, (int, float)) else _target_number(goal, "value")
    slope = summary.weight_trend.slope if summary.weight_trend else 0.0

    status, message = "on_track", ""
    if target:
        if current == target:
            status = "completed"
            message = f"You've reached your target weight of {target} kg."
        elif (current > target and slope >= 0) or (current < target and slope <= 0):
            status = "behind"
            message = "Your recent weight trend suggests you are not moving towards your goal. Consider small weekly adjustments."
        else:
            message = "You are progressing towards your goal based on recent trends."

    return GoalRecommendation(
        goal_id=goal.id,
        status=status,
        message=message,
        recommended_adjustment=WEIGHT_ADJUSTMENT if status == "behind" else None,
    )


def evaluate_nutrition_goal(goal: Goal, summary: AnalyticsSummary) -> GoalRecommendation:
    """Behind when the 7-day calorie average is more than 10% away from the target."""
    calories_ma = next((m.value for m in summary.calories_moving_average if m.window == 7), 0.0)
    target_calories = _target_number(goal, "calories")

    status, message = "on_track", "Log a few days of meals to evaluate this goal."
    if target_calories and calories_ma:
        if abs(calories_ma - target_calories) / target_calories > NUTRITION_TOLERANCE:
            status = "behind"
            message = f"Your 7-day average calories ({round(calories_ma)}) differs from your goal ({target_calories:g})."
        else:
            message = f"Your 7-day average calories ({round(calories_ma)}) is close to your goal."

    return GoalRecommendation(
        goal_id=goal.id,
        status=status,
        message=message,
        recommended_adjustment=NUTRITION_ADJUSTMENT if status == "behind" else None,
    )


def evaluate_habit_goal(goal: Goal, data: AppData) -> GoalRecommendation:
    """On track once the latest log's streak for the habit reaches `minDays` (7 by default)."""
    latest_date = max(data.daily_logs.keys()) if data.daily_logs else None
    latest_log = data.daily_logs[latest_date] if latest_date else None
    habit_id = _target_field(goal, "habitId")
    if not isinstance(habit_id, str):
        habit_id = None
    min_days = _target_number(goal, "minDays") or DEFAULT_HABIT_MIN_DAYS
    label = habit_id or goal.id

    streak = latest_log.habit_streak.get(habit_id, 0) if latest_log and habit_id else 0
    if streak >= min_days:
        return GoalRecommendation(
            goal_id=goal.id,
            status="on_track",
            message=f"You're maintaining {label} with a {streak}-day streak.",
        )
    return GoalRecommendation(
        goal_id=goal.id,
        status="behind",
        message=f"Your {label} streak is {streak}. Aim for consistency.",
    )


def evaluate_goals(data: AppData, summary: Optional[AnalyticsSummary] = None, today: DateLike = None) -> List[GoalRecommendation]:
    """Evaluate every goal in the profile's goals_list against a 30-day analytics summary."""
    if summary is None:
        summary = summarize_analytics(data.daily_logs, data.weight_logs, GOAL_LOOKBACK_DAYS, today=today)

    recommendations = []
    for goal in data.profile.goals_list:
        if goal.type == "weight":
            recommendations.append(evaluate_weight_goal(goal, data, summary))
        elif goal.type == "nutrition":
            recommendations.append(evaluate_nutrition_goal(goal, summary))
        elif goal.type == "habit":
            recommendations.append(evaluate_habit_goal(goal, data))

    logger.debug(f"Evaluated {len(recommendations)} goals: {[r.status for r in recommendations]}")
    return recommendations
