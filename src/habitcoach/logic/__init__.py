from .analytics import summarize_analytics
from .behavioral import analyze_behavioral_patterns, analyze_triggers, get_personalized_tip
from .coach import analyze_for_coach, generate_coach_advice
from .goals import evaluate_goals

__all__ = [
    'summarize_analytics',
    'analyze_behavioral_patterns',
    'analyze_triggers',
    'get_personalized_tip',
    'analyze_for_coach',
    'generate_coach_advice',
    'evaluate_goals',
]
