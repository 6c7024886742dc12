# -*- coding: utf-8 -*-
"""
실행 스크립트 (run_simulation.py) 테스트.
"""
from run_simulation import parse_param, run_loop
from sentinel_trader.simulation.engine import SimulationDriver


class TestParseParam:

    def test_numbers_and_flags(self):
        assert parse_param("size=2") == ("size", 2)
        assert parse_param("reward_risk=2.5") == ("reward_risk", 2.5)
        assert parse_param("verbose=yes") == ("verbose", True)
        assert parse_param("mode=fast") == ("mode", "fast")


class TestRunLoop:

    def test_returns_only_last_tick(self, fixed_clock):
        driver = SimulationDriver(seed=3, clock=fixed_clock, event_log_size=500)
        last = run_loop(driver, ticks=25, interval=0.0, realtime=False)

        assert last.tick == 25
        assert last.candle == driver.history.latest
        assert driver.tick_count == 25
        assert not driver.is_running
        messages = [e.message for e in driver.event_log]
        assert messages[0] == "Bot Started."
        assert messages[-1] == "Bot Paused."

    def test_zero_ticks(self, fixed_clock):
        driver = SimulationDriver(seed=3, clock=fixed_clock)
        assert run_loop(driver, ticks=0, interval=0.0, realtime=False) is None
        assert not driver.is_running
