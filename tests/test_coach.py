import json
from datetime import date

import pytest

from habitcoach.logic.coach import (
    ACTION_LIBRARY,
    DEFAULT_MESSAGE,
    analyze_for_coach,
    completed_coach_actions,
    generate_coach_advice,
    is_evening_snack_entry,
)
from habitcoach.logic.models import CoachAdvice, CoachActionRecord


@pytest.fixture
def balanced_logs(entry, day_log, date_range):
    """14 days that trip none of the persona thresholds."""
    return {
        d: day_log([entry("Chicken and rice", 600, protein_g=110, mindful_rating=4)], water_ml=2000)
        for d in date_range(14)
    }


def test_empty_logs_give_zeroed_analysis(app_data):
    analysis = analyze_for_coach(app_data())
    assert analysis.persona_tags == []
    assert analysis.lookback_days == 14
    for field in (
        "logging_consistency", "avg_mindfulness", "calorie_std_dev", "evening_snack_percent",
        "emotion_trigger_percent", "hunger_mismatch_percent", "hydration_ratio", "protein_ratio",
    ):
        assert getattr(analysis, field) == 0


def test_hydration_ratio(app_data, day_log, date_range):
    logs = {d: day_log(water_ml=1000) for d in date_range(14)}
    analysis = analyze_for_coach(app_data(logs))
    assert analysis.hydration_ratio == 0.5
    assert "low_hydration" in analysis.persona_tags


def test_balanced_user_has_no_tags(app_data, balanced_logs):
    analysis = analyze_for_coach(app_data(balanced_logs))
    assert analysis.persona_tags == []
    assert analysis.logging_consistency == 1
    assert analysis.avg_mindfulness == 4
    assert analysis.protein_ratio == pytest.approx(1.1)
    assert analysis.hydration_ratio == 1


def test_logging_consistency_counts_days_with_meals(app_data, entry, day_log, date_range):
    dates = date_range(10)
    logs = {d: day_log([entry("Oats", 300)]) for d in dates[:7]}
    logs.update({d: day_log() for d in dates[7:]})
    analysis = analyze_for_coach(app_data(logs), lookback_days=14)
    assert analysis.logging_consistency == pytest.approx(0.5)


def test_emotional_eater(app_data, entry, day_log):
    logs = {"2024-01-01": day_log([
        entry("Chips", 200, eating_trigger="emotion"),
        entry("Cake", 350, eating_trigger="emotion"),
        entry("Soup", 250, eating_trigger="hunger"),
        entry("Bread", 150),
    ])}
    analysis = analyze_for_coach(app_data(logs))
    assert analysis.emotion_trigger_percent == 0.5
    assert "emotional_eater" in analysis.persona_tags


def test_evening_snacker_uses_name_heuristic(app_data, entry, day_log, date_range):
    d1, d2, d3, d4 = date_range(4)
    logs = {
        d1: day_log([entry("Evening Snack mix", 150)]),
        d2: day_log([entry("Chocolate Dessert", 400)]),
        d3: day_log([entry("dessert bite", 100)]),  # too small to count
        d4: day_log([entry("Dinner", 700)]),
    }
    analysis = analyze_for_coach(app_data(logs))
    assert analysis.evening_snack_percent == 0.5
    assert "evening_snacker" in analysis.persona_tags


def test_hunger_mismatch(app_data, entry, day_log):
    logs = {"2024-01-01": day_log([
        entry("Burger", 650, hunger_level=2),
        entry("Pasta", 500, hunger_level=3),
        entry("Fries", 400),
        entry("Apple", 80, hunger_level=1),
    ])}
    analysis = analyze_for_coach(app_data(logs))
    assert analysis.hunger_mismatch_percent == 0.25
    assert "habitual_grazer" in analysis.persona_tags


def test_calorie_std_dev(app_data, entry, day_log):
    logs = {
        "2024-01-01": day_log([entry("A", 1000)]),
        "2024-01-02": day_log([entry("B", 2000)]),
    }
    assert analyze_for_coach(app_data(logs)).calorie_std_dev == pytest.approx(500)


def test_zero_goals_do_not_divide_by_zero(app_data, profile, day_log):
    goals = profile.goals.model_copy(update={"water_ml": 0, "protein_g": 0})
    analysis = analyze_for_coach(app_data({"2024-01-01": day_log(water_ml=500)}, goals=goals))
    assert analysis.hydration_ratio == 500


def test_is_evening_snack_entry(entry):
    assert is_evening_snack_entry(entry("Afternoon SNACK"))
    assert is_evening_snack_entry(entry("dessert"))
    assert not is_evening_snack_entry(entry("Dinner"))


def test_advice_for_balanced_user(app_data, balanced_logs):
    advice = generate_coach_advice(app_data(balanced_logs), today=date(2024, 3, 5))
    assert advice.persona_tags == []
    assert advice.actions == []
    assert advice.focus_area == "consistency"
    assert advice.message == DEFAULT_MESSAGE
    assert advice.rationale == "Logging consistency 100% • Avg mindfulness 4.0/5"
    assert advice.generated_at == "2024-03-05"


def test_advice_caps_actions_and_matches_tags(app_data, entry, day_log, date_range):
    # Emotional evening snacking, low water, no protein, no mindfulness ratings
    logs = {
        d: day_log([entry("Late snack", 400, eating_trigger="emotion")], water_ml=300)
        for d in date_range(5)
    }
    advice = generate_coach_advice(app_data(logs))

    assert set(advice.persona_tags) >= {"emotional_eater", "evening_snacker", "low_hydration", "low_mindfulness", "low_protein_intake"}
    assert len(advice.actions) == 3
    assert [a.id for a in advice.actions] == ["mindful_breath", "hydrate_morning", "protein_breakfast"]
    for action in advice.actions:
        assert set(action.recommended_for) & set(advice.persona_tags)
    assert advice.focus_area == "emotional regulation"


def test_focus_priority(app_data, entry, day_log, date_range):
    # Evening snacking and low water, otherwise healthy
    logs = {
        d: day_log([entry("Dessert", 300, protein_g=120, mindful_rating=4)], water_ml=500)
        for d in date_range(3)
    }
    advice = generate_coach_advice(app_data(logs))
    assert advice.persona_tags == ["evening_snacker", "low_hydration"]
    assert advice.focus_area == "evening routine"
    assert [a.id for a in advice.actions] == ["hydrate_morning", "protein_breakfast", "evening_swap"]


def test_rationale_lists_notable_metrics(app_data, entry, day_log, date_range):
    logs = {d: day_log([entry("Toast", 300, eating_trigger="emotion")], water_ml=1000) for d in date_range(7)}
    rationale = generate_coach_advice(app_data(logs)).rationale
    parts = rationale.split(" • ")
    assert parts[0] == "Logging consistency 50%"
    assert parts[1] == "Avg mindfulness 0.0/5"
    assert "Emotion-driven meals 100%" in parts
    assert "Hydration 50% of goal" in parts
    assert "Protein 0% of goal" in parts


def test_advice_does_not_mutate_library(app_data, day_log):
    before = [a.model_copy(deep=True) for a in ACTION_LIBRARY]
    generate_coach_advice(app_data({"2024-01-01": day_log(water_ml=0)}))
    assert ACTION_LIBRARY == before


def test_advice_json_round_trip(app_data, entry, day_log):
    advice = generate_coach_advice(app_data({"2024-01-01": day_log([entry("Snack", 500, eating_trigger="emotion")])}))
    payload = advice.model_dump_json(by_alias=True)

    data = json.loads(payload)
    assert {"focusArea", "personaTags", "generatedAt"} <= set(data)
    assert "recommended_for" in data["actions"][0]
    assert CoachAdvice.model_validate_json(payload) == advice


def test_completed_coach_actions(day_log):
    log = day_log(coach_actions={
        "mindful_breath": CoachActionRecord(done=True, completed_at="2024-01-01T08:00:00"),
        "evening_swap": CoachActionRecord(done=False),
    })
    assert completed_coach_actions(log) == ["mindful_breath"]
    assert completed_coach_actions(day_log()) == []
