from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from habitcoach.config import get_settings
from habitcoach.logic.models import (
    AnalyticsSummary,
    AppData,
    BehavioralInsight,
    CoachAdvice,
    CoachAnalysis,
    GoalRecommendation,
    HabitCoachingTip,
    HabitProgress,
    MacroGoals,
    TriggerAnalysis,
    UserProfile,
)
from habitcoach.logic.analytics import summarize_analytics
from habitcoach.logic.behavioral import analyze_behavioral_patterns, analyze_triggers, get_personalized_tip
from habitcoach.logic.coach import analyze_for_coach, generate_coach_advice
from habitcoach.logic.goals import evaluate_goals
from habitcoach.logic.habits import summarize_habits
import habitcoach.logic.calculations as calculations

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Habit Coach API",
    description="Stateless analytics and behavioral coaching over a snapshot of logged nutrition data",
    version="1.0.0",
)

# --- EXCEPTION HANDLERS ---
@app.exception_handler(ValueError)
async def value_error_handler(request, exc):
    return JSONResponse(status_code=400, content={"error": "Invalid data", "detail": str(exc)})

@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

# --- API ENDPOINTS ---
@app.get("/")
def read_root():
    return {
        "message": "Welcome to the Habit Coach API",
        "endpoints": {
            "analytics": "/v1/analytics/summary",
            "behavior": ["/v1/behavior/insights", "/v1/behavior/triggers", "/v1/behavior/tip"],
            "coach": ["/v1/coach/analysis", "/v1/coach/advice"],
            "goals": "/v1/goals/evaluate",
            "profile": "/v1/profile/macro-goals",
            "habits": "/v1/habits/progress",
        },
    }

@app.post("/v1/analytics/summary", response_model=AnalyticsSummary)
def analytics_summary(data: AppData, lookback_days: int = Query(settings.analytics_lookback, ge=1)):
    summary = summarize_analytics(data.daily_logs, data.weight_logs, lookback_days)
    logger.info(f"Analytics summary over {len(data.daily_logs)} logs (lookback {lookback_days})")
    return summary

@app.post("/v1/behavior/insights", response_model=List[BehavioralInsight])
def behavior_insights(data: AppData, days: int = Query(settings.behavior_lookback, ge=1)):
    insights = analyze_behavioral_patterns(data.daily_logs, days)
    logger.info(f"Behavioral scan produced {len(insights)} insights")
    return insights

@app.post("/v1/behavior/triggers", response_model=List[TriggerAnalysis])
def behavior_triggers(data: AppData):
    return analyze_triggers(data.daily_logs)

@app.post("/v1/behavior/tip", response_model=Optional[HabitCoachingTip])
def behavior_tip(insights: List[BehavioralInsight]):
    return get_personalized_tip(insights)

@app.post("/v1/coach/analysis", response_model=CoachAnalysis)
def coach_analysis(data: AppData, lookback_days: int = Query(settings.coach_lookback, ge=1)):
    return analyze_for_coach(data, lookback_days)

@app.post("/v1/coach/advice", response_model=CoachAdvice)
def coach_advice(data: AppData, lookback_days: int = Query(settings.coach_lookback, ge=1)):
    advice = generate_coach_advice(data, lookback_days)
    logger.info(f"Coach advice: focus '{advice.focus_area}', tags {advice.persona_tags}")
    return advice

@app.post("/v1/goals/evaluate", response_model=List[GoalRecommendation])
def goals_evaluate(data: AppData):
    return evaluate_goals(data)

@app.post("/v1/profile/macro-goals", response_model=MacroGoals)
def profile_macro_goals(profile: UserProfile):
    return calculations.calculate_macro_goals(profile)

@app.post("/v1/habits/progress", response_model=HabitProgress)
def habits_progress(data: AppData, date: str = Query(..., description="Log date as YYYY-MM-DD")):
    log = data.daily_logs.get(date)
    if log is None:
        raise HTTPException(status_code=404, detail=f"No log for {date}")
    return summarize_habits(log, data.profile.preferred_habits or None)
