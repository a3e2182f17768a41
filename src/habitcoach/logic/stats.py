import numpy as np
from datetime import timedelta
from typing import Iterable, List, Sequence, Tuple, Union

from habitcoach.logic.dates import DateLike, coerce_date, to_local_iso_date
from habitcoach.logic.models import ForecastPoint, WeightTrend

Point = Union[Tuple[float, float], dict]


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0 for an empty series."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def std_dev(values: Iterable[float]) -> float:
    """Population standard deviation, 0 for fewer than 2 values."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size < 2:
        return 0.0
    m = mean(arr)
    return float(np.sqrt(mean((arr - m) ** 2)))


def moving_average(values: Sequence[float], window: int) -> float:
    """Mean of the last `window` values (or all of them if the series is shorter)."""
    if not values or window <= 0:
        return 0.0
    return mean(values[-window:])


def _xy(point: Point) -> Tuple[float, float]:
    if isinstance(point, dict):
        return float(point["x"]), float(point["y"])
    return float(point[0]), float(point[1])


def linear_regression(points: Sequence[Point]) -> WeightTrend:
    """
    Ordinary least squares fit over (x, y) points.
    Points may be (x, y) tuples or {"x": .., "y": ..} dicts.
    A zero denominator (a single distinct x) is replaced by 1, so the result is
    approximate rather than undefined.
    """
    if not points:
        return WeightTrend(slope=0.0, intercept=0.0)

    xy = np.array([_xy(p) for p in points], dtype=float)
    xs, ys = xy[:, 0], xy[:, 1]
    n = len(xy)

    sum_x, sum_y = xs.sum(), ys.sum()
    sum_xy = (xs * ys).sum()
    sum_xx = (xs * xs).sum()

    denom = n * sum_xx - sum_x * sum_x
    if denom == 0:
        denom = 1.0
    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return WeightTrend(slope=float(slope), intercept=float(intercept))


def forecast_values(start_date_iso: DateLike, slope: float, intercept: float, days: int) -> List[ForecastPoint]:
    """Project `days` points after the start date: value_i = slope * i + intercept, i = 1..days."""
    start = coerce_date(start_date_iso)
    return [
        ForecastPoint(date=to_local_iso_date(start + timedelta(days=i)), value=slope * i + intercept)
        for i in range(1, days + 1)
    ]
