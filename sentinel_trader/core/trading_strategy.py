"""
진입 전략 추상 클래스 정의.

[ 역할 ]
    진입 로직의 인터페이스를 정의.
    현재 캔들, 추세, 세션, 스프레드를 받아 매수/매도/홀드 시그널을 생성.
    청산은 전략이 아니라 simulation/risk.py::RiskManager가 담당.

[ 구현체 ]
    - strategies/asian_scalp_strategy.py::AsianScalpStrategy   (RSI 역추세 스캘핑)
    - strategies/trend_follow_strategy.py::TrendFollowStrategy (MA 정배열 추세추종)
    - strategies/session_strategy.py::SessionStrategy          (세션별로 위 둘을 선택)

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver.tick()에서
      열린 포지션이 없을 때만 generate_signal()을 호출하여 시그널을 받고 포지션 생성

[ 데이터 흐름 ]
    MarketContext(candle, trend, session, spread) → generate_signal() → Signal 반환
    Signal.signal_type이 BUY/SELL이면 엔진이 포지션을 연다
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sentinel_trader.core.market_data import Candle, SessionRegime, TrendStatus


class SignalType(Enum):
    """전략이 반환하는 시그널 종류."""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass
class Signal:
    """generate_signal()의 반환값. 엔진에 전달되어 포지션으로 변환됨."""
    signal_type: SignalType
    asset: str
    price: float = 0.0        # 진입 가격 (이번 틱 종가)
    size: float = 0.0         # 포지션 크기
    stop_loss: float = 0.0
    take_profit: float = 0.0
    reason: str = ""          # 시그널 발생 사유 (이벤트 로그용)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class MarketContext:
    """전략 판단 입력. simulation/engine.py가 매 틱 구성하여 전달."""
    asset: str
    candle: Candle
    trend: TrendStatus
    session: SessionRegime
    spread: float


class TradingStrategy(ABC):
    """진입 전략 추상 클래스.

    새 전략을 만들려면 이 클래스를 상속받아 3개 메서드를 구현하면 된다:
    - should_buy(): 매수 진입 조건 판단
    - should_sell(): 매도 진입 조건 판단
    - calculate_position_size(): 포지션 크기 결정

    generate_signal()은 매수 → 매도 순으로 판단하고 손절/익절 가격을 붙여 Signal을 만든다.
    """

    def __init__(self, name: str, params: dict[str, Any] | None = None):
        self.name = name
        self.params = params or {}  # config.yaml에서 로드된 전략 파라미터

    @abstractmethod
    def should_buy(self, context: MarketContext) -> tuple[bool, str]:
        """매수 진입 조건 판단.

        Returns:
            (매수 여부, 사유)
        """
        ...

    @abstractmethod
    def should_sell(self, context: MarketContext) -> tuple[bool, str]:
        """매도 진입 조건 판단.

        Returns:
            (매도 여부, 사유)
        """
        ...

    @abstractmethod
    def calculate_position_size(self, context: MarketContext, signal_type: SignalType) -> float:
        """포지션 크기 계산."""
        ...

    def stop_distance(self, context: MarketContext) -> float:
        """손절 거리 = max(캔들 범위 * atr_multiplier, spread * min_stop_spread_multiple)."""
        candle = context.candle
        atr_proxy = abs(candle.high - candle.low) * float(self.params.get("atr_multiplier", 3.0))
        floor = context.spread * float(self.params.get("min_stop_spread_multiple", 10.0))
        return max(atr_proxy, floor)

    def generate_signal(self, context: MarketContext) -> Signal:
        """진입 시그널 생성. 매수 조건 우선."""
        buy, buy_reason = self.should_buy(context)
        if buy:
            return self._build_signal(context, SignalType.BUY, buy_reason)

        sell, sell_reason = self.should_sell(context)
        if sell:
            return self._build_signal(context, SignalType.SELL, sell_reason)

        return Signal(signal_type=SignalType.HOLD, asset=context.asset, reason="조건 미충족")

    def _build_signal(self, context: MarketContext, signal_type: SignalType, reason: str) -> Signal:
        price = context.candle.close
        distance = self.stop_distance(context)
        reward_risk = float(self.params.get("reward_risk", 2.0))

        if signal_type == SignalType.BUY:
            stop_loss = price - distance
            take_profit = price + distance * reward_risk
        else:
            stop_loss = price + distance
            take_profit = price - distance * reward_risk

        return Signal(
            signal_type=signal_type,
            asset=context.asset,
            price=price,
            size=self.calculate_position_size(context, signal_type),
            stop_loss=stop_loss,
            take_profit=take_profit,
            reason=reason,
            metadata={"stop_distance": distance, "strategy": self.name},
        )
