"""
추세추종(MA 정배열) 전략 구현.

[ 역할 ]
    core/trading_strategy.py::TradingStrategy의 구현체.
    런던/뉴욕 세션처럼 방향성이 강할 때 MA7/MA25 배열과 추세 방향이 일치하면 진입.

[ 전략 흐름 ]
    열린 포지션이 없을 때 매 틱 generate_signal() 호출됨 (← simulation/engine.py에서)
        ├── should_buy():  MA7 > MA25, 추세 UP, RSI < rsi_overbought → BUY
        └── should_sell(): MA7 < MA25, 추세 DOWN, RSI > rsi_oversold → SELL
    RSI 조건은 이미 과열된 구간의 추격 진입을 막는다.

[ 파라미터 ]
    asian_scalp_strategy.py와 동일 (rsi_oversold, rsi_overbought, size, atr_multiplier,
    min_stop_spread_multiple, reward_risk)
"""

from typing import Any

from sentinel_trader.core.market_data import TrendStatus
from sentinel_trader.core.trading_strategy import MarketContext, SignalType, TradingStrategy
from sentinel_trader.strategies import register


@register("trend_follow")
class TrendFollowStrategy(TradingStrategy):
    """MA 정배열 추세추종 전략."""

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
        super().__init__(name="trend_follow", params=merged)

    def should_buy(self, context: MarketContext) -> tuple[bool, str]:
        candle = context.candle
        if (
            candle.ma_fast > candle.ma_slow
            and context.trend == TrendStatus.UP
            and candle.rsi < float(self.params["rsi_overbought"])
        ):
            return True, "Trend Follow: MA Cross UP"
        return False, f"MA7 {candle.ma_fast:.5f} / MA25 {candle.ma_slow:.5f}"

    def should_sell(self, context: MarketContext) -> tuple[bool, str]:
        candle = context.candle
        if (
            candle.ma_fast < candle.ma_slow
            and context.trend == TrendStatus.DOWN
            and candle.rsi > float(self.params["rsi_oversold"])
        ):
            return True, "Trend Follow: MA Cross DOWN"
        return False, f"MA7 {candle.ma_fast:.5f} / MA25 {candle.ma_slow:.5f}"

    def calculate_position_size(self, context: MarketContext, signal_type: SignalType) -> float:
        return float(self.params["size"])
