"""
포지션/계좌 관리 모듈.

[ 역할 ]
    잔고(balance), 열린 포지션, 청산 기록(ClosedTrade)을 통합 관리.
    잔고는 포지션 청산 시에만 변하고, 평가자산(equity)은 잔고 + 열린 포지션 손익.

[ 주요 클래스 ]
    Position     - 단일 포지션 (진입가, 손절/익절, 트레일링 단계, 평가손익)
    ClosedTrade  - 청산된 포지션 기록 (metrics.py에서 성과 계산에 사용)
    AccountState - {balance, equity} 스냅샷
    Portfolio    - 포지션 저장소 + 잔고 + 청산 기록

[ 포지션 수명 ]
    add_position()   → 열린 포지션 저장소에 추가 (동시에 1개만 허용)
    replace()        → 매 틱 리스크 관리 결과로 교체
    close_position() → 손익을 잔고에 정확히 1회 반영 후 저장소에서 제거

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver가 소유
    - simulation/metrics.py에서 portfolio.trade_history로 성과 계산
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class Side(Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass
class Position:
    """단일 포지션. 리스크 매니저는 dataclasses.replace()로 새 객체를 만들어 교체한다."""
    id: str
    asset: str
    side: Side
    entry_price: float
    size: float
    stop_loss: float
    take_profit: float
    current_price: float
    pnl: float = 0.0
    is_open: bool = True
    opened_at: float = 0.0          # epoch seconds
    trailing_step_count: int = 0    # 트레일링 스탑이 올라간(내려간) 단계 수

    def mark(self, price: float) -> float:
        """현재가 기준 평가손익."""
        if self.side == Side.BUY:
            return (price - self.entry_price) * self.size
        return (self.entry_price - price) * self.size

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["side"] = self.side.value
        return data


@dataclass
class ClosedTrade:
    """청산 기록. 자동 청산/수동 청산 모두 남는다."""
    position_id: str
    asset: str
    side: Side
    entry_price: float
    exit_price: float
    size: float
    pnl: float
    reason: str
    opened_at: float = 0.0
    closed_at: float = 0.0
    trailing_step_count: int = 0


@dataclass(frozen=True)
class AccountState:
    balance: float
    equity: float


class Portfolio:
    """포지션 저장소 + 잔고 관리.

    SimulationDriver가 소유하며, 열린 포지션은 최대 1개.
    trade_history는 metrics 계산에 사용됨.
    """

    def __init__(self, initial_balance: float):
        self.initial_balance = initial_balance
        self.balance = initial_balance                   # 실현 잔고
        self.positions: dict[str, Position] = {}         # id → 열린 Position
        self.trade_history: list[ClosedTrade] = []       # 전체 청산 내역

    @property
    def open_position(self) -> Position | None:
        """열린 포지션 (없으면 None)."""
        return next(iter(self.positions.values()), None)

    @property
    def has_open_position(self) -> bool:
        return bool(self.positions)

    @property
    def unrealized_pnl(self) -> float:
        return sum(p.pnl for p in self.positions.values())

    @property
    def realized_pnl(self) -> float:
        return self.balance - self.initial_balance

    @property
    def equity(self) -> float:
        """평가자산 = 잔고 + 열린 포지션 손익 합."""
        return self.balance + self.unrealized_pnl

    def snapshot(self) -> AccountState:
        return AccountState(balance=self.balance, equity=self.equity)

    def add_position(self, position: Position) -> None:
        """새 포지션 등록.

        Raises:
            ValueError: 이미 열린 포지션이 있음
        """
        if self.positions:
            raise ValueError(f"이미 열린 포지션이 있습니다: {self.open_position.id}")
        self.positions[position.id] = position

    def replace(self, position: Position) -> None:
        """열린 포지션을 갱신된 객체로 교체."""
        if position.id not in self.positions:
            raise KeyError(position.id)
        self.positions[position.id] = position

    def close_position(self, position_id: str, reason: str, closed_at: float = 0.0) -> ClosedTrade | None:
        """포지션 청산. 최종 pnl을 잔고에 반영하고 저장소에서 제거.

        이미 청산됐거나 없는 id면 아무것도 하지 않고 None 반환.
        """
        position = self.positions.pop(position_id, None)
        if position is None:
            return None

        position.is_open = False
        self.balance += position.pnl

        trade = ClosedTrade(
            position_id=position.id,
            asset=position.asset,
            side=position.side,
            entry_price=position.entry_price,
            exit_price=position.current_price,
            size=position.size,
            pnl=position.pnl,
            reason=reason,
            opened_at=position.opened_at,
            closed_at=closed_at,
            trailing_step_count=position.trailing_step_count,
        )
        self.trade_history.append(trade)
        return trade

    def discard_positions(self) -> list[Position]:
        """손익 반영 없이 열린 포지션 제거 (종목 전환 시)."""
        discarded = list(self.positions.values())
        self.positions.clear()
        return discarded

    def get_summary(self) -> dict[str, Any]:
        """계좌 요약."""
        return {
            "initial_balance": self.initial_balance,
            "balance": self.balance,
            "equity": self.equity,
            "realized_pnl": self.realized_pnl,
            "unrealized_pnl": self.unrealized_pnl,
            "open_positions": len(self.positions),
            "num_trades": len(self.trade_history),
        }
