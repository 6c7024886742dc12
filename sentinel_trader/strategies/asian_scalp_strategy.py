"""
아시아 세션 스캘핑(RSI 역추세) 전략 구현.

[ 역할 ]
    core/trading_strategy.py::TradingStrategy의 구현체.
    횡보가 잦은 아시아 세션에서 RSI 과매도면 매수, 과매수면 매도하는 평균회귀 전략.

[ 전략 흐름 ]
    열린 포지션이 없을 때 매 틱 generate_signal() 호출됨 (← simulation/engine.py에서)
        ├── should_buy():  RSI < rsi_oversold 이고 추세가 DOWN이 아님 → BUY
        └── should_sell(): RSI > rsi_overbought 이고 추세가 UP이 아님 → SELL

[ 파라미터 (config.yaml의 strategy.params에서 로드) ]
    rsi_oversold:             과매도 기준 (기본 30)
    rsi_overbought:           과매수 기준 (기본 70)
    size:                     포지션 크기 (기본 1)
    atr_multiplier:           손절 거리용 캔들 범위 배수 (기본 3)
    min_stop_spread_multiple: 최소 손절 거리 (spread 배수, 기본 10)
    reward_risk:              익절/손절 거리 비율 (기본 2)
"""

from typing import Any

from sentinel_trader.core.market_data import TrendStatus
from sentinel_trader.core.trading_strategy import MarketContext, SignalType, TradingStrategy
from sentinel_trader.strategies import register


@register("asian_scalp")
class AsianScalpStrategy(TradingStrategy):
    """RSI 역추세 스캘핑 전략."""

    DEFAULT_PARAMS = {
        "rsi_oversold": 30.0,
        "rsi_overbought": 70.0,
        "size": 1.0,
        "atr_multiplier": 3.0,
        "min_stop_spread_multiple": 10.0,
        "reward_risk": 2.0,
    }

    def __init__(self, params: dict[str, Any] | None = None):
        merged = {**self.DEFAULT_PARAMS, **(params or {})}
        super().__init__(name="asian_scalp", params=merged)

    @property
    def rsi_oversold(self) -> float:
        return float(self.params["rsi_oversold"])

    @property
    def rsi_overbought(self) -> float:
        return float(self.params["rsi_overbought"])

    def should_buy(self, context: MarketContext) -> tuple[bool, str]:
        if context.candle.rsi < self.rsi_oversold and context.trend != TrendStatus.DOWN:
            return True, "Asian Scalp: RSI Oversold"
        return False, f"RSI {context.candle.rsi:.1f} / 추세 {context.trend.value}"

    def should_sell(self, context: MarketContext) -> tuple[bool, str]:
        if context.candle.rsi > self.rsi_overbought and context.trend != TrendStatus.UP:
            return True, "Asian Scalp: RSI Overbought"
        return False, f"RSI {context.candle.rsi:.1f} / 추세 {context.trend.value}"

    def calculate_position_size(self, context: MarketContext, signal_type: SignalType) -> float:
        return float(self.params["size"])
