"""Technical indicators over a price series.

Every function returns None when the series is shorter than the period it
needs, so callers can render "N/A" without special-casing short histories.
"""
from typing import Dict, Optional, Sequence

import pandas as pd


def _series(values: Sequence[float]) -> pd.Series:
    return pd.Series(list(values), dtype=float)


def _ema_series(series: pd.Series, period: int) -> pd.Series:
    """EMA for every position from `period - 1` on, seeded with the SMA of the first `period` values."""
    seeded = series.iloc[period - 1:].copy()
    seeded.iloc[0] = series.iloc[:period].mean()
    return seeded.ewm(span=period, adjust=False).mean()


def sma(prices: Sequence[float], period: int) -> Optional[float]:
    if len(prices) < period:
        return None
    return float(_series(prices).rolling(period).mean().iloc[-1])


def ema(prices: Sequence[float], period: int) -> Optional[float]:
    """Exponential moving average seeded with the SMA of the first `period` prices."""
    if len(prices) < period:
        return None
    return float(_ema_series(_series(prices), period).iloc[-1])


def rsi(prices: Sequence[float], period: int = 14) -> Optional[float]:
    if len(prices) < period + 1:
        return None
    changes = _series(prices).diff()
    average_gain = changes.clip(lower=0).rolling(period).mean().iloc[-1]
    average_loss = (-changes).clip(lower=0).rolling(period).mean().iloc[-1]
    if average_loss == 0:
        return 100.0
    return float(100 - 100 / (1 + average_gain / average_loss))


def macd(prices: Sequence[float], fast: int = 12, slow: int = 26, signal: int = 9) -> Optional[Dict[str, float]]:
    """MACD line, signal line and histogram.

    The signal line is the EMA of the MACD series, so it needs
    `slow + signal - 1` prices; with fewer the signal is reported as None.
    """
    if len(prices) < slow:
        return None
    series = _series(prices)
    # both EMAs exist from index slow - 1 onward
    macd_series = (_ema_series(series, fast) - _ema_series(series, slow)).dropna()
    line = float(macd_series.iloc[-1])
    signal_line = None
    if len(macd_series) >= signal:
        signal_line = float(_ema_series(macd_series.reset_index(drop=True), signal).iloc[-1])
    return {
        "macd": line,
        "signal": signal_line,
        "histogram": line - signal_line if signal_line is not None else 0.0,
    }


def bollinger_bands(prices: Sequence[float], period: int = 20, deviations: float = 2) -> Optional[Dict[str, float]]:
    if len(prices) < period:
        return None
    window = _series(prices).rolling(period)
    middle = float(window.mean().iloc[-1])
    std = float(window.std(ddof=0).iloc[-1])
    return {"upper": middle + std * deviations, "middle": middle, "lower": middle - std * deviations}


def volume_sma(volumes: Sequence[float], period: int = 20) -> Optional[float]:
    return sma(volumes, period)


def compute_indicators(prices: Sequence[float], volumes: Sequence[float]) -> Dict[str, object]:
    return {
        "sma_20": sma(prices, 20),
        "sma_50": sma(prices, 50),
        "rsi": rsi(prices),
        "macd": macd(prices),
        "bollinger_bands": bollinger_bands(prices),
        "volume_sma": volume_sma(volumes),
    }
