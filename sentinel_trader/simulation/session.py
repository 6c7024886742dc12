"""
세션 시계 모듈.

[ 역할 ]
    정수 틱 카운터를 3개의 합성 거래 세션으로 매핑하고,
    세션별 변동성 배수와 방향성 바이어스를 결정.

[ 세션 구분 (기본값, tick_count % 300) ]
    0 ~ 100   → ASIAN     (변동성 0.5배, 바이어스 0)
    101 ~ 200 → LONDON    (변동성 2.0배, 바이어스 sin(t / 10초))
    201 ~ 299 → NEW_YORK  (변동성 2.0배, 바이어스 sin(t / 10초))

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver.tick() 시작 시
"""

import math
from dataclasses import dataclass

from sentinel_trader.core.market_data import SessionRegime


@dataclass
class SessionClock:
    """틱 카운터 → 세션 매핑. utils/config.py::SessionConfig 값으로 생성."""
    cycle_length: int = 300
    asian_end: int = 100
    london_end: int = 200
    asian_volatility: float = 0.5
    active_volatility: float = 2.0
    bias_period: float = 10.0   # 초

    def regime_for(self, tick_count: int) -> SessionRegime:
        phase = tick_count % self.cycle_length
        if phase <= self.asian_end:
            return SessionRegime.ASIAN
        if phase <= self.london_end:
            return SessionRegime.LONDON
        return SessionRegime.NEW_YORK

    def volatility_multiplier(self, regime: SessionRegime) -> float:
        if regime == SessionRegime.ASIAN:
            return self.asian_volatility
        return self.active_volatility

    def session_bias(self, regime: SessionRegime, now: float) -> float:
        """세션 바이어스 (-1 ~ 1). 아시아 세션은 0, 나머지는 벽시계 기준 완만한 진동."""
        if regime == SessionRegime.ASIAN:
            return 0.0
        return math.sin(now / self.bias_period)
