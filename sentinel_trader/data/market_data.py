"""
캔들 히스토리 관리 모듈.

[ 역할 ]
    최근 N개(기본 60) 캔들을 보관하는 링 버퍼. 가득 차면 가장 오래된 캔들부터 밀려난다.
    차트 표시용 DataFrame 변환 등 편의 메서드 제공.

[ 의존성 ]
    - core/market_data.py::Candle

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver가 종목별로 1개 소유
    - 종목 전환 시 clear()로 비움
"""

from collections import deque
from typing import Iterator

import pandas as pd

from sentinel_trader.core.market_data import Candle

CANDLE_COLUMNS = ["time", "open", "high", "low", "close", "ma_fast", "ma_slow", "rsi"]


class CandleHistory:
    """고정 용량 캔들 히스토리.

    사용 예:
        history = CandleHistory(capacity=60)
        history.append(candle)
        df = history.to_frame()
    """

    def __init__(self, capacity: int = 60):
        if capacity <= 0:
            raise ValueError(f"capacity는 1 이상이어야 합니다: {capacity}")
        self.capacity = capacity
        self._candles: deque[Candle] = deque(maxlen=capacity)

    def append(self, candle: Candle) -> None:
        self._candles.append(candle)

    def clear(self) -> None:
        self._candles.clear()

    def __len__(self) -> int:
        return len(self._candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    @property
    def latest(self) -> Candle | None:
        return self._candles[-1] if self._candles else None

    def candles(self) -> list[Candle]:
        """오래된 것 → 최신 순 캔들 리스트 (복사본)."""
        return list(self._candles)

    def closes(self) -> list[float]:
        return [c.close for c in self._candles]

    def tail(self, n: int) -> list[Candle]:
        """최근 n개 캔들."""
        if n <= 0:
            return []
        return list(self._candles)[-n:]

    def to_frame(self) -> pd.DataFrame:
        """차트용 DataFrame. columns: time, open, high, low, close, ma_fast, ma_slow, rsi"""
        if not self._candles:
            return pd.DataFrame(columns=CANDLE_COLUMNS)
        return pd.DataFrame([c.to_dict() for c in self._candles], columns=CANDLE_COLUMNS)
