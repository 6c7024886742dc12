# -*- coding: utf-8 -*-
"""
세션 시계 테스트.
"""
import math

import pytest

from sentinel_trader.core.market_data import SessionRegime
from sentinel_trader.simulation.session import SessionClock


class TestSessionClock:

    @pytest.mark.parametrize("tick, expected", [
        (0, SessionRegime.ASIAN),
        (100, SessionRegime.ASIAN),
        (101, SessionRegime.LONDON),
        (200, SessionRegime.LONDON),
        (201, SessionRegime.NEW_YORK),
        (299, SessionRegime.NEW_YORK),
        (300, SessionRegime.ASIAN),
        (401, SessionRegime.LONDON),
    ])
    def test_regime_boundaries(self, tick, expected):
        assert SessionClock().regime_for(tick) == expected

    def test_volatility_multiplier(self):
        clock = SessionClock()
        assert clock.volatility_multiplier(SessionRegime.ASIAN) == 0.5
        assert clock.volatility_multiplier(SessionRegime.LONDON) == 2.0
        assert clock.volatility_multiplier(SessionRegime.NEW_YORK) == 2.0

    def test_asian_has_no_bias(self):
        assert SessionClock().session_bias(SessionRegime.ASIAN, 12345.0) == 0.0

    def test_active_session_bias_oscillates(self):
        clock = SessionClock()
        assert clock.session_bias(SessionRegime.LONDON, 15.0) == pytest.approx(math.sin(1.5))
        for now in range(0, 200, 7):
            assert -1.0 <= clock.session_bias(SessionRegime.NEW_YORK, float(now)) <= 1.0

    def test_custom_cycle(self):
        clock = SessionClock(cycle_length=30, asian_end=10, london_end=20)
        assert clock.regime_for(10) == SessionRegime.ASIAN
        assert clock.regime_for(11) == SessionRegime.LONDON
        assert clock.regime_for(21) == SessionRegime.NEW_YORK
        assert clock.regime_for(30) == SessionRegime.ASIAN
