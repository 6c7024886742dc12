# -*- coding: utf-8 -*-
"""
합성 가격 피드 테스트.
"""
import math

import numpy as np
import pytest

from conftest import FIXED_NOW
from sentinel_trader.feeds.synthetic_feed import SEED_PRICES, SyntheticPriceFeed


class ScriptedRng:
    """uniform() 호출마다 정해진 값을 순서대로 반환."""

    def __init__(self, values):
        self._values = iter(values)

    def uniform(self, low, high):
        return next(self._values)


def _clock():
    return FIXED_NOW


class TestCandleGeneration:

    def test_momentum_and_price_formula(self):
        """noise 0.5, bias 1 → momentum 0.1, change (0.1 + 0.5) * 2 = 1.2"""
        feed = SyntheticPriceFeed(rng=ScriptedRng([0.5, 0.2, 0.4]), clock=_clock)
        candle = feed.next_candle("XAUUSD", [], volatility_multiplier=1.0, session_bias=1.0)

        assert candle.open == 2350.0
        assert candle.close == pytest.approx(2351.2)
        assert candle.high == pytest.approx(2351.2 + 0.2 * 2)
        assert candle.low == pytest.approx(2350.0 - 0.4 * 2)

        state = feed.get_state("XAUUSD")
        assert state.momentum == pytest.approx(0.1)
        assert state.last_price == pytest.approx(2351.2)

    def test_momentum_persists_across_ticks(self):
        feed = SyntheticPriceFeed(rng=ScriptedRng([0.5, 0.0, 0.0, -1.0, 0.0, 0.0]), clock=_clock)
        first = feed.next_candle("XAUUSD", [], 1.0, 0.0)
        second = feed.next_candle("XAUUSD", [first], 1.0, 0.0)

        # 0.05 * 0.9 + (-1) * 0.1 = -0.055
        assert feed.get_state("XAUUSD").momentum == pytest.approx(-0.055)
        assert second.open == first.close
        assert second.close == pytest.approx(first.close + (-0.055 - 1.0) * 2.0)

    def test_first_candle_indicators_are_bootstrap_values(self):
        feed = SyntheticPriceFeed(rng=np.random.default_rng(1), clock=_clock)
        candle = feed.next_candle("BTCUSD", [], 0.5, 0.0)
        assert candle.ma_fast == candle.close
        assert candle.ma_slow == candle.close
        assert candle.rsi == 50.0

    def test_wicks_surround_body(self):
        feed = SyntheticPriceFeed(rng=np.random.default_rng(3), clock=_clock)
        history = []
        for _ in range(100):
            candle = feed.next_candle("EURUSD", history, 2.0, 0.7)
            assert candle.high >= max(candle.open, candle.close)
            assert candle.low <= min(candle.open, candle.close)
            history.append(candle)

    def test_same_seed_reproduces_sequence(self):
        def generate(seed):
            feed = SyntheticPriceFeed(rng=np.random.default_rng(seed), clock=_clock)
            history = []
            for _ in range(50):
                history.append(feed.next_candle("XAUUSD", history, 2.0, 0.3))
            return history

        assert generate(11) == generate(11)
        assert generate(11) != generate(12)

    def test_assets_keep_separate_state(self):
        feed = SyntheticPriceFeed(rng=np.random.default_rng(5), clock=_clock)
        feed.next_candle("XAUUSD", [], 1.0, 0.0)
        assert feed.get_last_price("BTCUSD") == SEED_PRICES["BTCUSD"]
        assert feed.get_state("BTCUSD").momentum == 0.0


class TestAssetState:

    @pytest.mark.parametrize("price", [math.nan, math.inf, -1.0, 0.0])
    def test_seed_rejects_invalid_price(self, price):
        feed = SyntheticPriceFeed(rng=np.random.default_rng(0), clock=_clock)
        with pytest.raises(ValueError):
            feed.seed_asset("XAUUSD", price)
        assert feed.get_last_price("XAUUSD") == SEED_PRICES["XAUUSD"]

    def test_unknown_asset(self):
        feed = SyntheticPriceFeed(rng=np.random.default_rng(0), clock=_clock)
        with pytest.raises(ValueError):
            feed.next_candle("DOGEUSD", [], 1.0, 0.0)

    def test_get_state_returns_copy(self):
        feed = SyntheticPriceFeed(rng=np.random.default_rng(0), clock=_clock)
        state = feed.get_state("XAUUSD")
        state.last_price = 1.0
        assert feed.get_last_price("XAUUSD") == SEED_PRICES["XAUUSD"]
