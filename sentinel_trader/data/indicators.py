"""
기술적 지표 계산 모듈.

[ 역할 ]
    종가 시퀀스로 이동평균, RSI를 계산하고 캔들의 지표로 추세를 판별하는 순수 함수 모음.
    데이터가 부족하면 에러 대신 중립값을 돌려준다 (시뮬레이션 초반 부트스트랩 구간).

[ 호출하는 곳 ]
    - feeds/synthetic_feed.py에서 새 캔들의 ma_fast / ma_slow / rsi 계산
    - simulation/engine.py에서 매 틱 classify_trend() 호출
"""

from typing import Sequence

import numpy as np
import pandas as pd

from sentinel_trader.core.market_data import Candle, TrendStatus

MA_FAST_WINDOW = 7
MA_SLOW_WINDOW = 25
RSI_PERIOD = 14


def moving_average(closes: Sequence[float], window: int) -> float:
    """최근 window개 종가의 단순 이동평균.

    샘플이 window개 미만이면 마지막 종가를 그대로 반환한다.

    Raises:
        ValueError: closes가 비어 있거나 window가 1 미만
    """
    if window < 1:
        raise ValueError(f"이동평균 window는 1 이상이어야 함: {window}")
    if len(closes) == 0:
        raise ValueError("이동평균 계산 불가: 종가 데이터 없음")
    if len(closes) < window:
        return float(closes[-1])
    return float(pd.Series(closes, dtype=float).tail(window).mean())


def rsi(closes: Sequence[float], period: int = RSI_PERIOD) -> float:
    """RSI (0~100).

    최근 period개의 연속 차분으로 평균 상승폭/하락폭을 구한다.
    데이터가 period + 1개 미만이면 50, 하락폭이 0이면 100.

    Raises:
        ValueError: period가 1 미만
    """
    if period < 1:
        raise ValueError(f"RSI period는 1 이상이어야 함: {period}")
    if len(closes) < period + 1:
        return 50.0

    deltas = np.diff(np.asarray(closes[-(period + 1):], dtype=float))
    gains = deltas[deltas > 0].sum()
    losses = -deltas[deltas < 0].sum()

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100 - 100 / (1 + rs))


def classify_trend(candle: Candle) -> TrendStatus:
    """캔들의 (close, ma_fast, ma_slow)로 추세 판별.

    UP:   ma_fast > ma_slow 이고 close > ma_fast
    DOWN: ma_fast < ma_slow 이고 close < ma_fast
    나머지는 SIDEWAYS
    """
    if candle.ma_fast > candle.ma_slow and candle.close > candle.ma_fast:
        return TrendStatus.UP
    if candle.ma_fast < candle.ma_slow and candle.close < candle.ma_fast:
        return TrendStatus.DOWN
    return TrendStatus.SIDEWAYS
