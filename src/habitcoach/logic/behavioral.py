"""
Behavioral coaching: pattern insights, eating-trigger breakdowns and
habit-breaking tips drawn from recent food logs.
"""
import logging
import random
from typing import Dict, List, Optional

from habitcoach.logic.dates import recent_dates
from habitcoach.logic.models import BehavioralInsight, DailyLog, FoodEntry, HabitCoachingTip, TriggerAnalysis
from habitcoach.logic.stats import mean

logger = logging.getLogger(__name__)

DEFAULT_PATTERN_DAYS = 7
EMOTIONAL_EPISODE_THRESHOLD = 3
LONG_STREAK_DAYS = 7
SNACK_MEAL = "Snacks"

# --- STATIC LIBRARIES ---

COACHING_TIPS: List[HabitCoachingTip] = [
    HabitCoachingTip(
        id="mindful_hunger",
        title="Check Your Hunger Level",
        description="Before eating, rate your hunger from 1-5. Aim to eat when you're at a 3-4.",
        category="mindful_eating",
        difficulty="beginner",
    ),
    HabitCoachingTip(
        id="pause_before_eating",
        title="Take a 3-Minute Pause",
        description='Before eating, take 3 deep breaths and ask yourself: "Am I hungry or am I feeling something else?"',
        category="mindful_eating",
        difficulty="beginner",
    ),
    HabitCoachingTip(
        id="emotional_check",
        title="Identify Your Emotions",
        description="When you want to eat, first identify what emotion you're feeling. Are you actually hungry?",
        category="emotional_eating",
        difficulty="beginner",
    ),
    HabitCoachingTip(
        id="stress_alternatives",
        title="Stress-Relief Alternatives",
        description="Instead of eating when stressed, try: 5-minute walk, calling a friend, or deep breathing.",
        category="stress_management",
        difficulty="intermediate",
    ),
    HabitCoachingTip(
        id="portion_visualization",
        title="Use Visual Portion Guides",
        description="Palm = protein serving, fist = vegetables, cupped hand = carbs, thumb = fats.",
        category="portion_control",
        difficulty="beginner",
    ),
    HabitCoachingTip(
        id="mindful_chewing",
        title="Chew Slowly and Mindfully",
        description="Put your fork down between bites. Chew each bite 20-30 times and notice flavors.",
        category="mindful_eating",
        difficulty="intermediate",
    ),
    HabitCoachingTip(
        id="trigger_identification",
        title="Map Your Eating Triggers",
        description="Notice patterns: What time? What mood? What situation? Knowledge is power.",
        category="emotional_eating",
        difficulty="intermediate",
    ),
    HabitCoachingTip(
        id="meal_timing",
        title="Regular Meal Schedule",
        description="Eat at consistent times to prevent extreme hunger that leads to overeating.",
        category="meal_timing",
        difficulty="beginner",
    ),
]

MINDFUL_EATING_PROMPTS: Dict[str, List[str]] = {
    "pre_meal": [
        "How hungry am I right now on a scale of 1-5?",
        "What emotion am I feeling right now?",
        "Am I eating because I'm hungry or for another reason?",
        "What would satisfy me right now?",
        "How do I want to feel after this meal?",
    ],
    "during_meal": [
        "How does this food taste?",
        "What textures and flavors do I notice?",
        "Am I eating quickly or slowly?",
        "How satisfied am I feeling?",
        "Am I still hungry?",
    ],
    "post_meal": [
        "How satisfied do I feel (1-5)?",
        "How was my mindfulness during this meal?",
        "What did I enjoy most about this food?",
        "How do I feel emotionally now?",
        "What would I do differently next time?",
    ],
}

TRIGGER_ALTERNATIVES: Dict[str, List[str]] = {
    "emotion": [
        "Take 5 deep breaths",
        "Call a friend or family member",
        "Go for a short walk",
        "Journal about your feelings",
        "Listen to calming music",
    ],
    "stress": [
        "Practice progressive muscle relaxation",
        "Try a 5-minute meditation",
        "Do some light stretching",
        "Take a hot shower or bath",
        "Organize something small",
    ],
    "bored": [
        "Read a few pages of a book",
        "Do a quick creative activity",
        "Call someone you haven't talked to",
        "Take a walk outside",
        "Clean or organize a small area",
    ],
    "social": [
        "Suggest a non-food activity",
        "Eat mindfully and focus on conversation",
        "Choose smaller portions",
        "Drink water between bites",
        "Focus on enjoying the company",
    ],
    "habit": [
        "Replace the routine with a new habit",
        "Change your environment",
        "Set a timer before eating",
        "Drink a glass of water first",
        "Ask yourself if you're truly hungry",
    ],
}
GENERIC_ALTERNATIVE = "Take a moment to pause and reflect"


# --- HEURISTICS ---

def is_emotional_entry(entry: FoodEntry) -> bool:
    return entry.eating_trigger == "emotion" or (entry.mood_before is not None and entry.mood_before != "neutral")


def count_snack_entries(logs: List[DailyLog]) -> int:
    """
    Stand-in for late-night eating until entries carry timestamps:
    every entry in the Snacks meal counts, whatever time it was eaten.
    """
    return sum(len(log.meals.get(SNACK_MEAL, [])) for log in logs)


# --- ANALYSIS ---

def analyze_behavioral_patterns(daily_logs: Dict[str, DailyLog], days: int = DEFAULT_PATTERN_DAYS) -> List[BehavioralInsight]:
    """
    Scan the most recent `days` logs (by date) for emotional eating, mindfulness,
    long habit streaks and frequent snacking. Every rule that fires adds one
    insight, in that order; the habit rule adds one per qualifying habit.
    """
    logs = [daily_logs[d] for d in recent_dates(daily_logs, days)]
    entries = [entry for log in logs for entry in log.all_entries()]
    insights: List[BehavioralInsight] = []

    emotional_count = sum(1 for e in entries if is_emotional_entry(e))
    if emotional_count > EMOTIONAL_EPISODE_THRESHOLD:
        insights.append(BehavioralInsight(
            type="pattern",
            title="Emotional Eating Pattern Detected",
            message=f"You've logged {emotional_count} emotional eating episodes this week.",
            actionable_tip="Try the 3-minute pause technique before eating to check if you're truly hungry.",
            related_data={"count": emotional_count},
        ))

    ratings = [e.mindful_rating for e in entries if e.mindful_rating]
    if ratings:
        avg_mindfulness = mean(ratings)
        # 3.0 <= avg < 4.0 is left alone on purpose
        if avg_mindfulness < 3:
            insights.append(BehavioralInsight(
                type="suggestion",
                title="Focus on Mindful Eating",
                message=f"Your average mindfulness rating is {avg_mindfulness:.1f}/5.",
                actionable_tip="Try eating one meal per day without distractions - no phone, TV, or reading.",
                related_data={"average": avg_mindfulness},
            ))
        elif avg_mindfulness >= 4:
            insights.append(BehavioralInsight(
                type="achievement",
                title="Great Mindful Eating!",
                message=f"You're averaging {avg_mindfulness:.1f}/5 for mindful eating. Keep it up!",
                actionable_tip="You're doing great! Try teaching someone else about mindful eating.",
                related_data={"average": avg_mindfulness},
            ))

    if logs:
        for habit, streak in logs[-1].habit_streak.items():
            if streak >= LONG_STREAK_DAYS:
                insights.append(BehavioralInsight(
                    type="achievement",
                    title="Habit Streak!",
                    message=f'{streak} days strong with "{habit}"!',
                    actionable_tip="Celebrate this success and keep the momentum going!",
                    related_data={"habit": habit, "streak": streak},
                ))

    snack_count = count_snack_entries(logs)
    if snack_count > days / 2:
        insights.append(BehavioralInsight(
            type="pattern",
            title="Late Night Eating Pattern",
            message="You seem to snack frequently in the evenings.",
            actionable_tip="Try having a larger, more satisfying dinner or plan a healthy evening snack.",
            related_data={"snackCount": snack_count},
        ))

    logger.debug(f"Behavioral scan over {len(logs)} days produced {len(insights)} insights")
    return insights


def get_suggested_alternatives(trigger: str) -> List[str]:
    return list(TRIGGER_ALTERNATIVES.get(trigger, [GENERIC_ALTERNATIVE]))


def analyze_triggers(daily_logs: Dict[str, DailyLog]) -> List[TriggerAnalysis]:
    """Count every logged eating trigger across all days, with the foods it led to."""
    counts: Dict[str, int] = {}
    foods: Dict[str, List[str]] = {}

    for day in sorted(daily_logs.keys()):
        for entry in daily_logs[day].all_entries():
            if not entry.eating_trigger:
                continue
            trigger = entry.eating_trigger
            counts[trigger] = counts.get(trigger, 0) + 1
            seen = foods.setdefault(trigger, [])
            if entry.name not in seen:
                seen.append(entry.name)

    return [
        TriggerAnalysis(
            trigger=trigger,
            frequency=count,
            associated_foods=foods[trigger],
            suggested_alternatives=get_suggested_alternatives(trigger),
        )
        for trigger, count in counts.items()
    ]


def _focus_category(insights: List[BehavioralInsight]) -> str:
    if any("emotional" in i.message for i in insights):
        return "emotional_eating"
    if any("mindful" in i.message for i in insights):
        return "mindful_eating"
    if any("stress" in i.message for i in insights):
        return "stress_management"
    return "mindful_eating"


def get_personalized_tip(insights: List[BehavioralInsight], rng: Optional[random.Random] = None) -> Optional[HabitCoachingTip]:
    """Pick one tip from the category the recent insights point at. Pass `rng` for repeatable picks."""
    category = _focus_category(insights)
    relevant = [tip for tip in COACHING_TIPS if tip.category == category]
    if not relevant:
        return None
    return (rng or random).choice(relevant)


def get_mindful_prompt(phase: str, rng: Optional[random.Random] = None) -> str:
    """Random reflection question for a meal phase: pre_meal, during_meal or post_meal."""
    if phase not in MINDFUL_EATING_PROMPTS:
        raise ValueError(f"Unknown meal phase '{phase}'. Expected one of: {', '.join(MINDFUL_EATING_PROMPTS)}")
    return (rng or random).choice(MINDFUL_EATING_PROMPTS[phase])
