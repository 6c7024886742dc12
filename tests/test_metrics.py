# -*- coding: utf-8 -*-
"""
성과 지표 계산 테스트.
"""
import pytest

from sentinel_trader.data.portfolio import ClosedTrade, Side
from sentinel_trader.simulation.metrics import calculate_metrics, max_drawdown


def trade(pnl: float, reason: str = "TP Hit") -> ClosedTrade:
    return ClosedTrade(
        position_id="x", asset="XAUUSD", side=Side.BUY, entry_price=2350.0,
        exit_price=2350.0 + pnl, size=1.0, pnl=pnl, reason=reason,
    )


class TestMaxDrawdown:

    def test_peak_to_trough(self):
        assert max_drawdown([100.0, 110.0, 99.0, 105.0, 120.0]) == pytest.approx(10.0)

    def test_empty_and_monotonic(self):
        assert max_drawdown([]) == 0.0
        assert max_drawdown([1.0, 2.0, 3.0]) == 0.0


class TestCalculateMetrics:

    def test_no_trades(self):
        report = calculate_metrics([], [10_000.0, 10_002.0], 10_000, unrealized_pnl=2.0)
        assert report.total_trades == 0
        assert report.unrealized_pnl == 2.0
        assert report.total_return == pytest.approx(0.02)

    def test_trade_statistics(self):
        trades = [trade(6.0), trade(-3.0, "SL Hit"), trade(-1.0, "Trend Invalidated (Early Exit)"), trade(4.0)]
        report = calculate_metrics(trades, [10_000.0, 10_006.0, 10_002.0, 10_006.0], 10_000)

        assert report.realized_pnl == pytest.approx(6.0)
        assert report.winning_trades == 2
        assert report.losing_trades == 2
        assert report.win_rate == pytest.approx(50.0)
        assert report.avg_profit == pytest.approx(5.0)
        assert report.avg_loss == pytest.approx(-2.0)
        assert report.profit_factor == pytest.approx(2.5)
        assert report.max_consecutive_losses == 2
        assert report.max_consecutive_wins == 1
        assert report.exit_reasons == {"TP Hit": 2, "SL Hit": 1, "Trend Invalidated (Early Exit)": 1}
        assert "시뮬레이션 성과 리포트" in report.summary()

    def test_profit_factor_without_losses(self):
        report = calculate_metrics([trade(1.0)], [], 10_000)
        assert report.profit_factor == float("inf")
