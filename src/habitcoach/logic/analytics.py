import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from habitcoach.logic.dates import DateLike, coerce_date, recent_dates, to_local_iso_date
from habitcoach.logic.models import AnalyticsSummary, DailyLog, MovingAverage
from habitcoach.logic.stats import forecast_values, linear_regression, mean, moving_average

logger = logging.getLogger(__name__)

# --- CONTROL PARAMETERS ---
DEFAULT_LOOKBACK_DAYS = 30
CALORIE_WINDOWS = (7, 14, 30)
MINDFULNESS_WINDOWS = (7, 14)
FORECAST_DAYS = 14


def daily_series(daily_logs: Dict[str, DailyLog], lookback_days: int = DEFAULT_LOOKBACK_DAYS) -> Tuple[List[float], List[float]]:
    """Per-day calorie totals and mean mindfulness ratings for the most recent days.

    Days without any mindful rating score 0.
    """
    calories_series, mindfulness_series = [], []
    for day in recent_dates(daily_logs, lookback_days):
        log = daily_logs[day]
        entries = log.all_entries()
        calories_series.append(log.total_calories())
        ratings = [e.mindful_rating for e in entries if e.mindful_rating]
        mindfulness_series.append(mean(ratings))
    return calories_series, mindfulness_series


def _windowed(series: List[float], windows) -> List[MovingAverage]:
    return [MovingAverage(window=w, value=moving_average(series, min(w, len(series)))) for w in windows]


def summarize_analytics(
    daily_logs: Dict[str, DailyLog],
    weight_logs: Dict[str, float],
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    today: DateLike = None,
    now: Optional[datetime] = None,
) -> AnalyticsSummary:
    """
    Roll daily logs and weight logs up into moving averages and a weight forecast.

    Missing data never raises: no logs gives zero averages, fewer than two
    weigh-ins gives no trend and an empty forecast. `today` anchors the
    forecast only when there are no weigh-ins to start from.
    """
    calories_series, mindfulness_series = daily_series(daily_logs, lookback_days)

    weight_dates = sorted(weight_logs.keys())
    weight_points = [(idx, weight_logs[d]) for idx, d in enumerate(weight_dates)]
    weight_trend = linear_regression(weight_points) if len(weight_points) >= 2 else None

    forecast = []
    if weight_trend:
        start = weight_dates[-1] if weight_dates else to_local_iso_date(coerce_date(today))
        forecast = forecast_values(start, weight_trend.slope, weight_trend.intercept, FORECAST_DAYS)

    logger.debug(
        f"Summarized {len(calories_series)} days and {len(weight_points)} weigh-ins "
        f"(trend={'yes' if weight_trend else 'no'})"
    )

    return AnalyticsSummary(
        calories_moving_average=_windowed(calories_series, CALORIE_WINDOWS),
        mindfulness_moving_average=_windowed(mindfulness_series, MINDFULNESS_WINDOWS),
        weight_trend=weight_trend,
        weight_forecast=forecast,
        last_updated=(now or datetime.now()).isoformat(),
    )
