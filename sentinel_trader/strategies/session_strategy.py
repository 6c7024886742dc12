"""
세션 전환형 전략 구현 (기본 전략).

[ 역할 ]
    세션에 따라 하위 전략을 골라 위임.
        ASIAN            → AsianScalpStrategy   (역추세 스캘핑)
        LONDON, NEW_YORK → TrendFollowStrategy  (추세추종)

[ 파라미터 ]
    하위 전략에 그대로 전달된다. 하위 전략별 기본값은 각 DEFAULT_PARAMS 참고.
"""

from typing import Any

from sentinel_trader.core.market_data import SessionRegime
from sentinel_trader.core.trading_strategy import (
    MarketContext,
    Signal,
    SignalType,
    TradingStrategy,
)
from sentinel_trader.strategies import register
from sentinel_trader.strategies.asian_scalp_strategy import AsianScalpStrategy
from sentinel_trader.strategies.trend_follow_strategy import TrendFollowStrategy


@register("session")
class SessionStrategy(TradingStrategy):
    """세션별 전략 선택기."""

    DEFAULT_PARAMS = {**AsianScalpStrategy.DEFAULT_PARAMS, **TrendFollowStrategy.DEFAULT_PARAMS}

    def __init__(self, params: dict[str, Any] | None = None):
        super().__init__(name="session", params=dict(params or {}))
        self.scalp = AsianScalpStrategy(params=self.params)
        self.trend = TrendFollowStrategy(params=self.params)

    def strategy_for(self, session: SessionRegime) -> TradingStrategy:
        if session == SessionRegime.ASIAN:
            return self.scalp
        return self.trend

    def should_buy(self, context: MarketContext) -> tuple[bool, str]:
        return self.strategy_for(context.session).should_buy(context)

    def should_sell(self, context: MarketContext) -> tuple[bool, str]:
        return self.strategy_for(context.session).should_sell(context)

    def calculate_position_size(self, context: MarketContext, signal_type: SignalType) -> float:
        return self.strategy_for(context.session).calculate_position_size(context, signal_type)

    def generate_signal(self, context: MarketContext) -> Signal:
        return self.strategy_for(context.session).generate_signal(context)
