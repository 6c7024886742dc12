# -*- coding: utf-8 -*-
"""
진입 전략 / 전략 레지스트리 테스트.
"""
import pytest

from conftest import make_candle
from sentinel_trader.core.market_data import SessionRegime, TrendStatus
from sentinel_trader.core.trading_strategy import MarketContext, SignalType
from sentinel_trader.strategies import create_strategy, list_strategies, strategy_params
from sentinel_trader.strategies.asian_scalp_strategy import AsianScalpStrategy
from sentinel_trader.strategies.session_strategy import SessionStrategy
from sentinel_trader.strategies.trend_follow_strategy import TrendFollowStrategy

GOLD_SPREAD = 0.2


def context(candle, trend, session=SessionRegime.ASIAN, spread=GOLD_SPREAD):
    return MarketContext(asset="XAUUSD", candle=candle, trend=trend, session=session, spread=spread)


class TestRegistry:

    def test_registered_names(self):
        assert {"asian_scalp", "session", "trend_follow"} <= set(list_strategies())

    def test_create_with_override(self):
        strategy = create_strategy("asian_scalp", params={"rsi_oversold": 25})
        assert isinstance(strategy, AsianScalpStrategy)
        assert strategy.rsi_oversold == 25.0
        assert strategy.rsi_overbought == 70.0

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="unknown_one"):
            create_strategy("unknown_one")

    def test_unknown_param_rejected(self):
        """오타 난 파라미터 키는 조용히 무시되지 않는다"""
        with pytest.raises(ValueError, match="rsi_oversld"):
            create_strategy("asian_scalp", params={"rsi_oversld": 25})

    def test_session_defaults_cover_sub_strategies(self):
        defaults = strategy_params("session")
        assert set(strategy_params("asian_scalp")) <= set(defaults)
        assert set(strategy_params("trend_follow")) <= set(defaults)
        assert defaults["reward_risk"] == 2.0

    def test_strategy_params_returns_copy(self):
        strategy_params("trend_follow")["size"] = 99
        assert strategy_params("trend_follow")["size"] == 1.0


class TestAsianScalp:

    def test_oversold_sideways_buys(self):
        signal = AsianScalpStrategy().generate_signal(context(make_candle(2350.0, rsi=25), TrendStatus.SIDEWAYS))
        assert signal.signal_type == SignalType.BUY
        assert signal.reason == "Asian Scalp: RSI Oversold"
        assert signal.size == 1.0

    def test_oversold_downtrend_holds(self):
        signal = AsianScalpStrategy().generate_signal(context(make_candle(2350.0, rsi=25), TrendStatus.DOWN))
        assert signal.signal_type == SignalType.HOLD

    def test_overbought_sideways_sells(self):
        signal = AsianScalpStrategy().generate_signal(context(make_candle(2350.0, rsi=75), TrendStatus.SIDEWAYS))
        assert signal.signal_type == SignalType.SELL
        assert signal.reason == "Asian Scalp: RSI Overbought"

    def test_overbought_uptrend_holds(self):
        signal = AsianScalpStrategy().generate_signal(context(make_candle(2350.0, rsi=75), TrendStatus.UP))
        assert signal.signal_type == SignalType.HOLD

    def test_neutral_rsi_holds(self):
        signal = AsianScalpStrategy().generate_signal(context(make_candle(2350.0, rsi=50), TrendStatus.SIDEWAYS))
        assert signal.signal_type == SignalType.HOLD


class TestTrendFollow:

    def test_ma_cross_up_buys(self):
        candle = make_candle(2355.0, ma_fast=2354.0, ma_slow=2350.0, rsi=60)
        signal = TrendFollowStrategy().generate_signal(context(candle, TrendStatus.UP, SessionRegime.LONDON))
        assert signal.signal_type == SignalType.BUY
        assert signal.reason == "Trend Follow: MA Cross UP"

    def test_overheated_rsi_blocks_buy(self):
        candle = make_candle(2355.0, ma_fast=2354.0, ma_slow=2350.0, rsi=75)
        signal = TrendFollowStrategy().generate_signal(context(candle, TrendStatus.UP, SessionRegime.LONDON))
        assert signal.signal_type == SignalType.HOLD

    def test_ma_cross_down_sells(self):
        candle = make_candle(2345.0, ma_fast=2346.0, ma_slow=2350.0, rsi=40)
        signal = TrendFollowStrategy().generate_signal(context(candle, TrendStatus.DOWN, SessionRegime.NEW_YORK))
        assert signal.signal_type == SignalType.SELL
        assert signal.reason == "Trend Follow: MA Cross DOWN"

    def test_oversold_blocks_sell(self):
        candle = make_candle(2345.0, ma_fast=2346.0, ma_slow=2350.0, rsi=25)
        signal = TrendFollowStrategy().generate_signal(context(candle, TrendStatus.DOWN, SessionRegime.NEW_YORK))
        assert signal.signal_type == SignalType.HOLD


class TestStops:

    def test_atr_proxy_distance(self):
        """캔들 범위 1.0 → ATR 근사 3.0 > 최소거리 2.0"""
        candle = make_candle(2350.0, rsi=25, high=2350.5, low=2349.5)
        signal = AsianScalpStrategy().generate_signal(context(candle, TrendStatus.SIDEWAYS))
        assert signal.stop_loss == pytest.approx(2347.0)
        assert signal.take_profit == pytest.approx(2356.0)
        assert signal.price == 2350.0

    def test_minimum_spread_distance(self):
        """캔들 범위 0.1 → ATR 근사 0.3 < 최소거리 10*spread = 2.0"""
        candle = make_candle(2350.0, rsi=75, high=2350.05, low=2349.95)
        signal = AsianScalpStrategy().generate_signal(context(candle, TrendStatus.SIDEWAYS))
        assert signal.signal_type == SignalType.SELL
        assert signal.stop_loss == pytest.approx(2352.0)
        assert signal.take_profit == pytest.approx(2346.0)


class TestSessionStrategy:

    def test_asian_session_uses_scalp(self):
        strategy = SessionStrategy()
        candle = make_candle(2350.0, rsi=25)
        assert strategy.generate_signal(context(candle, TrendStatus.SIDEWAYS, SessionRegime.ASIAN)).signal_type == SignalType.BUY
        assert strategy.generate_signal(context(candle, TrendStatus.SIDEWAYS, SessionRegime.LONDON)).signal_type == SignalType.HOLD

    def test_active_sessions_use_trend_follow(self):
        strategy = SessionStrategy()
        candle = make_candle(2355.0, ma_fast=2354.0, ma_slow=2350.0, rsi=60)
        for session in (SessionRegime.LONDON, SessionRegime.NEW_YORK):
            signal = strategy.generate_signal(context(candle, TrendStatus.UP, session))
            assert signal.reason == "Trend Follow: MA Cross UP"
        assert strategy.generate_signal(context(candle, TrendStatus.UP, SessionRegime.ASIAN)).signal_type == SignalType.HOLD

    def test_params_reach_sub_strategies(self):
        strategy = create_strategy("session", params={"size": 2})
        candle = make_candle(2350.0, rsi=25)
        assert strategy.generate_signal(context(candle, TrendStatus.SIDEWAYS)).size == 2.0
