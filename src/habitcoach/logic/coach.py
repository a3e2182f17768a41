import logging
import re
from typing import List

from habitcoach.logic.dates import DateLike, coerce_date, recent_dates, to_local_iso_date
from habitcoach.logic.models import AppData, CoachAction, CoachAdvice, CoachAnalysis, DailyLog, FoodEntry
from habitcoach.logic.stats import mean, std_dev

logger = logging.getLogger(__name__)

# --- CONTROL PARAMETERS ---
DEFAULT_LOOKBACK = 14
MAX_ACTIONS = 3
EVENING_SNACK_MIN_CALORIES = 120
HUNGER_MISMATCH_MAX_HUNGER = 2
HUNGER_MISMATCH_MIN_CALORIES = 300

# (tag, metric attribute, comparison, threshold)
PERSONA_RULES = [
    ("emotional_eater", "emotion_trigger_percent", ">", 0.25),
    ("evening_snacker", "evening_snack_percent", ">", 0.35),
    ("habitual_grazer", "hunger_mismatch_percent", ">", 0.15),
    ("low_mindfulness", "avg_mindfulness", "<", 2.5),
    ("low_protein_intake", "protein_ratio", "<", 0.8),
    ("low_hydration", "hydration_ratio", "<", 0.7),
]

ACTION_LIBRARY: List[CoachAction] = [
    CoachAction(
        id="mindful_breath", label="Pre-meal 3-breath pause",
        description="Pause for three slow breaths before eating to raise mindfulness.",
        focus_area="mindfulness", impact="medium", recommended_for=["low_mindfulness", "emotional_eater"],
    ),
    CoachAction(
        id="hydrate_morning", label="Morning hydration",
        description="Drink 500ml water within 30 minutes of waking.",
        focus_area="hydration", impact="low", recommended_for=["low_hydration"],
    ),
    CoachAction(
        id="protein_breakfast", label="Protein breakfast",
        description="Include ≥25g protein at breakfast to improve satiety.",
        focus_area="protein", impact="high", recommended_for=["low_protein_intake", "evening_snacker"],
    ),
    CoachAction(
        id="evening_swap", label="Evening swap",
        description="Swap evening high-calorie snack for herbal tea or fruit 3 nights this week.",
        focus_area="evening", impact="medium", recommended_for=["evening_snacker"],
    ),
    CoachAction(
        id="emotion_journal", label="Emotion journal",
        description="Write 1–2 lines describing feelings before emotional snack.",
        focus_area="emotions", impact="medium", recommended_for=["emotional_eater"],
    ),
]

# Highest priority first
FOCUS_PRIORITY = [
    ("emotional_eater", "emotional regulation",
     "You have a pattern of eating driven by emotions. Building a brief pre-meal awareness habit can reduce impulsive choices."),
    ("evening_snacker", "evening routine",
     "Evenings appear to contribute a sizeable calorie share. Adjusting your late routine and boosting morning protein can help."),
    ("low_hydration", "hydration",
     "Hydration is below target. Improving water intake can aid appetite regulation and energy."),
    ("low_mindfulness", "mindful eating",
     "Mindfulness scores are low. Small pauses and sensory check-ins can enhance satiety awareness."),
    ("low_protein_intake", "protein distribution",
     "Protein intake lags behind your goal. Earlier-day protein can reduce late snacking."),
]
DEFAULT_FOCUS = "consistency"
DEFAULT_MESSAGE = "You are building a solid foundation. Let’s refine one small area this week to keep momentum."

_EVENING_NAME = re.compile(r"snack|dessert", re.IGNORECASE)


def is_evening_snack_entry(entry: FoodEntry) -> bool:
    """
    Name-based stand-in for "eaten in the evening": entries have no timestamps,
    so anything called a snack or dessert counts.
    """
    return bool(_EVENING_NAME.search(entry.name))


def _is_hunger_mismatch(entry: FoodEntry) -> bool:
    return (
        entry.hunger_level is not None
        and entry.hunger_level <= HUNGER_MISMATCH_MAX_HUNGER
        and entry.calories > HUNGER_MISMATCH_MIN_CALORIES
    )


def persona_tags_for(analysis: CoachAnalysis) -> List[str]:
    tags = []
    for tag, attr, op, threshold in PERSONA_RULES:
        value = getattr(analysis, attr)
        if (op == ">" and value > threshold) or (op == "<" and value < threshold):
            tags.append(tag)
    return tags


def analyze_for_coach(data: AppData, lookback_days: int = DEFAULT_LOOKBACK) -> CoachAnalysis:
    """
    Build the persona profile over the last `lookback_days` logged dates.

    With no logs in the window every metric is 0 and no persona tags are set.
    """
    dates = recent_dates(data.daily_logs, lookback_days)
    if not dates:
        return CoachAnalysis(lookback_days=lookback_days)

    goals = data.profile.goals
    days_with_meals = 0
    evening_snack_days = 0
    total_meals = emotion_meals = hunger_mismatch_meals = 0
    daily_calories, water_totals, protein_totals = [], [], []
    mindfulness_ratings = []

    for day in dates:
        log: DailyLog = data.daily_logs[day]
        entries = log.all_entries()
        if entries:
            days_with_meals += 1

        daily_calories.append(log.total_calories())
        if any(is_evening_snack_entry(e) and e.calories > EVENING_SNACK_MIN_CALORIES for e in entries):
            evening_snack_days += 1

        for e in entries:
            total_meals += 1
            if e.eating_trigger == "emotion":
                emotion_meals += 1
            if _is_hunger_mismatch(e):
                hunger_mismatch_meals += 1
            if e.mindful_rating:
                mindfulness_ratings.append(e.mindful_rating)

        water_totals.append(log.water_ml or 0)
        protein_totals.append(sum(e.protein_g for e in entries))

    analysis = CoachAnalysis(
        lookback_days=lookback_days,
        logging_consistency=days_with_meals / lookback_days,
        avg_mindfulness=mean(mindfulness_ratings),
        calorie_std_dev=std_dev(daily_calories),
        evening_snack_percent=evening_snack_days / days_with_meals if days_with_meals else 0.0,
        emotion_trigger_percent=emotion_meals / total_meals if total_meals else 0.0,
        hunger_mismatch_percent=hunger_mismatch_meals / total_meals if total_meals else 0.0,
        hydration_ratio=mean(water_totals) / (goals.water_ml or 1),
        protein_ratio=mean(protein_totals) / (goals.protein_g or 1),
    )
    analysis.persona_tags = persona_tags_for(analysis)
    logger.debug(f"Coach analysis over {len(dates)} days: tags={analysis.persona_tags}")
    return analysis


def _rationale(analysis: CoachAnalysis) -> str:
    parts = [
        f"Logging consistency {analysis.logging_consistency * 100:.0f}%",
        f"Avg mindfulness {analysis.avg_mindfulness:.1f}/5",
    ]
    if analysis.emotion_trigger_percent > 0.15:
        parts.append(f"Emotion-driven meals {analysis.emotion_trigger_percent * 100:.0f}%")
    if analysis.evening_snack_percent > 0.25:
        parts.append(f"Evening snack days {analysis.evening_snack_percent * 100:.0f}%")
    if analysis.hydration_ratio < 0.9:
        parts.append(f"Hydration {analysis.hydration_ratio * 100:.0f}% of goal")
    if analysis.protein_ratio < 0.9:
        parts.append(f"Protein {analysis.protein_ratio * 100:.0f}% of goal")
    return " • ".join(parts)


def generate_coach_advice(data: AppData, lookback_days: int = DEFAULT_LOOKBACK, today: DateLike = None) -> CoachAdvice:
    """Turn the persona analysis into one focus area, a message and up to three actions."""
    analysis = analyze_for_coach(data, lookback_days)
    tags = analysis.persona_tags

    # Library order, not ranked by impact
    actions = [a for a in ACTION_LIBRARY if any(t in tags for t in a.recommended_for)][:MAX_ACTIONS]

    focus_area, message = DEFAULT_FOCUS, DEFAULT_MESSAGE
    for tag, area, text in FOCUS_PRIORITY:
        if tag in tags:
            focus_area, message = area, text
            break

    return CoachAdvice(
        focus_area=focus_area,
        message=message,
        rationale=_rationale(analysis),
        persona_tags=list(tags),
        actions=[a.model_copy(deep=True) for a in actions],
        generated_at=to_local_iso_date(coerce_date(today)),
    )


def completed_coach_actions(log: DailyLog) -> List[str]:
    """Ids of coach actions marked done in a day's log."""
    if not log.coach_actions:
        return []
    return [action_id for action_id, record in log.coach_actions.items() if record.done]
