"""
시뮬레이션 성과 지표 계산 모듈.

[ 역할 ]
    청산 기록 + 틱별 equity를 받아 실현/미실현 손익과 성과 지표를 계산.
    calculate_metrics() 함수가 핵심.

[ 계산하는 지표 ]
    - 실현 손익 / 미실현 손익 / 총 수익률
    - MDD (틱별 equity 기준 최대 낙폭)
    - 승률, 평균 수익/손실, 수익 팩터
    - 연속 승/패
    - 청산 사유별 횟수

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver.performance()
"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from sentinel_trader.data.portfolio import ClosedTrade


@dataclass
class PerformanceReport:
    """성과 지표. summary()로 포맷된 리포트 출력 가능."""
    realized_pnl: float = 0.0         # 청산 손익 합
    unrealized_pnl: float = 0.0       # 열린 포지션 평가손익
    total_return: float = 0.0         # (실현 + 미실현) / 초기 잔고 (%)
    max_drawdown: float = 0.0         # 최대 낙폭 MDD (%)
    win_rate: float = 0.0             # 승률 (%)
    avg_profit: float = 0.0           # 수익 거래 평균 이익
    avg_loss: float = 0.0             # 손실 거래 평균 손실
    profit_factor: float = 0.0        # 총이익 / 총손실 (1 이상이면 수익)
    total_trades: int = 0             # 청산 횟수
    winning_trades: int = 0
    losing_trades: int = 0
    max_consecutive_wins: int = 0
    max_consecutive_losses: int = 0
    exit_reasons: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        """성과 요약 문자열."""
        lines = [
            "=" * 50,
            "시뮬레이션 성과 리포트",
            "=" * 50,
            f"실현 손익:       {self.realized_pnl:>12,.2f}",
            f"미실현 손익:     {self.unrealized_pnl:>12,.2f}",
            f"총 수익률:       {self.total_return:>11.2f}%",
            f"최대 낙폭(MDD):  {self.max_drawdown:>11.2f}%",
            "-" * 50,
            f"총 거래 횟수:    {self.total_trades:>12d}",
            f"승률:            {self.win_rate:>11.2f}%",
            f"수익 거래:       {self.winning_trades:>12d}",
            f"손실 거래:       {self.losing_trades:>12d}",
            f"평균 수익:       {self.avg_profit:>12,.2f}",
            f"평균 손실:       {self.avg_loss:>12,.2f}",
            f"수익 팩터:       {self.profit_factor:>12.2f}",
            "-" * 50,
            f"최대 연속 수익:  {self.max_consecutive_wins:>12d}",
            f"최대 연속 손실:  {self.max_consecutive_losses:>12d}",
        ]
        if self.exit_reasons:
            lines.append("-" * 50)
            for reason, count in sorted(self.exit_reasons.items()):
                lines.append(f"  {reason}: {count}")
        lines.append("=" * 50)
        return "\n".join(lines)


def max_drawdown(equity_curve: list[float]) -> float:
    """고점 대비 최대 하락폭 (%)."""
    if not equity_curve:
        return 0.0
    values = np.asarray(equity_curve, dtype=float)
    peaks = np.maximum.accumulate(values)
    with np.errstate(divide="ignore", invalid="ignore"):
        drawdowns = np.where(peaks > 0, (peaks - values) / peaks * 100, 0.0)
    return float(drawdowns.max())


def calculate_metrics(
    trade_history: list[ClosedTrade],
    equity_curve: list[float],
    initial_balance: float,
    unrealized_pnl: float = 0.0,
) -> PerformanceReport:
    """성과 지표 계산. engine.py의 performance()에서 호출됨.

    Args:
        trade_history: Portfolio.trade_history (청산 순서)
        equity_curve: 틱별 equity
        initial_balance: 초기 잔고
        unrealized_pnl: 현재 열린 포지션 평가손익
    """
    report = PerformanceReport()

    profits = [t.pnl for t in trade_history]
    report.realized_pnl = float(sum(profits))
    report.unrealized_pnl = float(unrealized_pnl)
    if initial_balance > 0:
        report.total_return = (report.realized_pnl + report.unrealized_pnl) / initial_balance * 100
    report.max_drawdown = max_drawdown(equity_curve)

    report.total_trades = len(trade_history)
    if not trade_history:
        return report

    report.exit_reasons = dict(Counter(t.reason for t in trade_history))

    winners = [p for p in profits if p > 0]
    losers = [p for p in profits if p <= 0]
    report.winning_trades = len(winners)
    report.losing_trades = len(losers)
    report.win_rate = len(winners) / len(profits) * 100

    if winners:
        report.avg_profit = float(np.mean(winners))
    if losers:
        report.avg_loss = float(np.mean(losers))

    total_profit = sum(winners)
    total_loss = abs(sum(losers))
    report.profit_factor = total_profit / total_loss if total_loss > 0 else float("inf")

    # 연속 승패
    consecutive_wins = 0
    consecutive_losses = 0
    for p in profits:
        if p > 0:
            consecutive_wins += 1
            consecutive_losses = 0
            report.max_consecutive_wins = max(report.max_consecutive_wins, consecutive_wins)
        else:
            consecutive_losses += 1
            consecutive_wins = 0
            report.max_consecutive_losses = max(report.max_consecutive_losses, consecutive_losses)

    return report
