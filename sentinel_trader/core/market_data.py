"""
시세 데이터 모델 및 가격 피드 추상 클래스 정의.

[ 역할 ]
    캔들(OHLC + 지표), 추세 라벨, 세션 구분 등 엔진 전체가 공유하는 시장 데이터 타입과
    다음 캔들을 생성하는 가격 피드 인터페이스를 정의.
    데이터 소스(합성 피드, 테스트용 스크립트 피드 등)에 독립적으로 엔진에 캔들 공급.

[ 구현체 ]
    - feeds/synthetic_feed.py::SyntheticPriceFeed  (랜덤워크 + 모멘텀 합성 피드)
    - tests의 ScriptedFeed                          (정해진 캔들을 순서대로 반환)

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver.tick()에서 매 틱 next_candle() 호출
    - data/market_data.py::CandleHistory가 Candle을 보관
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Sequence


class TrendStatus(Enum):
    """data/indicators.py::classify_trend()의 반환값."""
    UP = "UP"
    DOWN = "DOWN"
    SIDEWAYS = "SIDEWAYS"


class SessionRegime(Enum):
    """틱 카운터로 결정되는 합성 거래 세션. 값은 화면/로그 표시용 라벨."""
    ASIAN = "ASIAN (Sideways/Scalp)"
    LONDON = "LONDON (Volatile/Breakout)"
    NEW_YORK = "NEW YORK (Trend/Reversal)"


@dataclass(frozen=True)
class Candle:
    """단일 봉(캔들). 생성 후 변경 불가.

    ma_fast / ma_slow / rsi는 이 캔들의 종가까지 포함한 종가 시퀀스로 계산된 값.
    """
    time: str
    open: float
    high: float
    low: float
    close: float
    ma_fast: float    # 단기 이동평균 (7)
    ma_slow: float    # 장기 이동평균 (25)
    rsi: float        # RSI (14)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class PriceFeed(ABC):
    """가격 피드 추상 클래스.

    모든 피드 구현체는 이 클래스를 상속받아 아래 메서드를 구현해야 한다.
    """

    @abstractmethod
    def next_candle(
        self,
        asset: str,
        history: Sequence[Candle],
        volatility_multiplier: float,
        session_bias: float,
    ) -> Candle:
        """다음 캔들 생성.

        Args:
            asset: 종목 코드 (예: "XAUUSD")
            history: 직전까지의 캔들 (오래된 것 → 최신 순)
            volatility_multiplier: 세션별 변동성 배수
            session_bias: 세션 방향성 바이어스 (-1 ~ 1)

        Returns:
            지표가 계산된 새 Candle
        """
        ...

    @abstractmethod
    def get_last_price(self, asset: str) -> float:
        """종목의 마지막 가격 조회."""
        ...
