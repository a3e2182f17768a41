from typing import Dict, List, Optional

from habitcoach.logic.models import DailyLog, HabitProgress

DEFAULT_HABITS: List[Dict[str, str]] = [
    {"id": "drink_water_wake_up", "name": "Drink water when I wake up", "category": "hydration"},
    {"id": "eat_slowly", "name": "Eat slowly and mindfully", "category": "mindful_eating"},
    {"id": "no_phone_eating", "name": "No phone/TV while eating", "category": "mindful_eating"},
    {"id": "pause_before_snack", "name": "Pause before snacking", "category": "awareness"},
    {"id": "plan_meals", "name": "Plan tomorrow's meals", "category": "preparation"},
    {"id": "movement_break", "name": "Take a movement break", "category": "activity"},
    {"id": "stress_check", "name": "Check stress levels", "category": "emotional_health"},
    {"id": "gratitude_moment", "name": "Notice one thing I'm grateful for", "category": "mindfulness"},
]
DEFAULT_SELECTION_SIZE = 4


def default_habit_ids() -> List[str]:
    return [h["id"] for h in DEFAULT_HABITS[:DEFAULT_SELECTION_SIZE]]


def summarize_habits(log: DailyLog, selected_habits: Optional[List[str]] = None) -> HabitProgress:
    """Today's habit completion against the user's selected habits, plus the longest running streak."""
    selected = selected_habits or default_habit_ids()
    completed = sum(1 for done in log.daily_habits.values() if done)
    percent = completed / len(selected) * 100 if selected else 0.0
    longest = max(log.habit_streak.values(), default=0)
    return HabitProgress(
        completed_count=completed,
        total_habits=len(selected),
        completion_percent=percent,
        longest_streak=longest,
    )
