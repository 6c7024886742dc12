"""
시뮬레이션 엔진 모듈.

[ 역할 ]
    종목 상태(가격 피드), 캔들 히스토리, 잔고, 열린 포지션, 이벤트 로그를 소유하고
    한 틱 단위로 캔들 생성 → 추세 판별 → 리스크 관리 → 진입 판단을 순서대로 실행.
    시스템의 핵심 실행 루프를 담당.

[ 실행 흐름 ]
    tick() 호출 시:
        1. 세션 시계로 이번 틱 세션 결정 (변동성 배수, 바이어스)
        2. PriceFeed.next_candle()로 새 캔들 생성 → 히스토리에 추가
        3. classify_trend()로 추세 판별
        4. 세션이 바뀌었으면 이벤트 기록 + 어드바이저 요청 (히스토리 20개 이상일 때)
        5. 열린 포지션이 있으면 RiskManager.evaluate() → 교체 또는 청산
        6. 열린 포지션이 없으면 strategy.generate_signal() → 시그널이면 포지션 생성
        7. equity 기록 후 TickResult 반환

[ 의존성 ]
    - core/market_data.py::PriceFeed (캔들 생성)
    - core/trading_strategy.py::TradingStrategy (진입 판단)
    - simulation/risk.py::RiskManager (청산/트레일링)
    - data/portfolio.py::Portfolio (잔고/포지션)
    - simulation/advisory.py::AdvisoryDispatcher (선택, 없으면 어드바이저 호출 안 함)

[ 호출하는 곳 ]
    - run_simulation.py (진입점)의 틱 루프
    - 테스트에서 tick()을 직접 반복 호출
"""

import logging
import math
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable

import numpy as np
import pandas as pd

from sentinel_trader.core.advisor import Advisor, AdvisoryRequest
from sentinel_trader.core.market_data import Candle, PriceFeed, SessionRegime, TrendStatus
from sentinel_trader.core.trading_strategy import MarketContext, SignalType, TradingStrategy
from sentinel_trader.data.assets import DEFAULT_ASSET, AssetConfig, get_asset_config
from sentinel_trader.data.indicators import classify_trend
from sentinel_trader.data.market_data import CandleHistory
from sentinel_trader.data.portfolio import AccountState, ClosedTrade, Portfolio, Position, Side
from sentinel_trader.feeds.synthetic_feed import SyntheticPriceFeed
from sentinel_trader.simulation.advisory import AdvisoryDispatcher
from sentinel_trader.simulation.events import Event, EventLog, Severity
from sentinel_trader.simulation.metrics import PerformanceReport, calculate_metrics
from sentinel_trader.simulation.risk import REASON_MANUAL, RiskManager
from sentinel_trader.simulation.session import SessionClock
from sentinel_trader.strategies import create_strategy
from sentinel_trader.utils.config import Config

logger = logging.getLogger("sentinel_trader.engine")

POSITION_ID_ALPHABET = list("abcdefghijklmnopqrstuvwxyz0123456789")
POSITION_ID_LENGTH = 9
ADVISORY_CANDLES = 5


@dataclass
class TickResult:
    """tick()의 반환값. 표시/테스트용 스냅샷."""
    tick: int
    candle: Candle
    trend: TrendStatus
    session: SessionRegime
    account: AccountState
    position: Position | None = None     # 열린 포지션 사본 (없으면 None)
    events: list[Event] = field(default_factory=list)
    closed_trade: ClosedTrade | None = None


class SimulationDriver:
    """단일 종목, 단일 포지션 트레이딩 시뮬레이터. tick()으로 한 틱씩 진행."""

    def __init__(
        self,
        asset: str = DEFAULT_ASSET,
        initial_balance: float = 10_000,
        feed: PriceFeed | None = None,
        strategy: TradingStrategy | None = None,
        risk_manager: RiskManager | None = None,
        session_clock: SessionClock | None = None,
        advisor: Advisor | None = None,
        dispatcher: AdvisoryDispatcher | None = None,
        seed: int | None = None,
        clock: Callable[[], float] = time.time,
        history_size: int = 60,
        event_log_size: int = 50,
        advisory_min_history: int = 20,
    ):
        self.asset_config: AssetConfig = get_asset_config(asset)
        self.asset = asset
        self.clock = clock
        self.rng = np.random.default_rng(seed)

        self.feed = feed or SyntheticPriceFeed(rng=self.rng, clock=clock)
        self.strategy = strategy or create_strategy("session")
        self.risk_manager = risk_manager or RiskManager()
        self.session_clock = session_clock or SessionClock()
        if dispatcher is None and advisor is not None:
            dispatcher = AdvisoryDispatcher(advisor)
        self.dispatcher = dispatcher
        self.advisory_min_history = advisory_min_history

        self.portfolio = Portfolio(initial_balance)
        self.history = CandleHistory(capacity=history_size)
        self.event_log = EventLog(capacity=event_log_size)

        self.tick_count = 0
        self.session = SessionRegime.ASIAN
        self.trend = TrendStatus.SIDEWAYS
        self.is_running = False
        self.equity_curve: list[float] = []  # 틱별 equity (MDD 계산용). 실행 중에는 비우지 않음

    @classmethod
    def from_config(
        cls,
        config: Config,
        advisor: Advisor | None = None,
        feed: PriceFeed | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "SimulationDriver":
        """Config 객체로 엔진 생성."""
        sim = config.simulation
        return cls(
            asset=sim.asset,
            initial_balance=sim.initial_balance,
            feed=feed,
            strategy=create_strategy(config.strategy.name, params=config.strategy.params),
            risk_manager=RiskManager(
                invalidation_spread_multiple=config.risk.invalidation_spread_multiple,
                trail_step_multiple=config.risk.trail_step_multiple,
                trail_secure_multiple=config.risk.trail_secure_multiple,
            ),
            session_clock=SessionClock(
                cycle_length=config.session.cycle_length,
                asian_end=config.session.asian_end,
                london_end=config.session.london_end,
                asian_volatility=config.session.asian_volatility,
                active_volatility=config.session.active_volatility,
                bias_period=config.session.bias_period,
            ),
            advisor=advisor,
            seed=sim.seed,
            clock=clock,
            history_size=sim.history_size,
            event_log_size=sim.event_log_size,
            advisory_min_history=config.session.advisory_min_history,
        )

    # ─── 상태 조회 ─────────────────────────────────────────────────────────

    @property
    def spread(self) -> float:
        return self.asset_config.spread

    @property
    def account(self) -> AccountState:
        return self.portfolio.snapshot()

    @property
    def latest_advisory(self) -> str | None:
        """표시용 최신 어드바이저 코멘트."""
        if self.dispatcher is None or self.dispatcher.latest is None:
            return None
        return self.dispatcher.latest.text

    def open_positions(self) -> list[Position]:
        """열린 포지션 사본 (0개 또는 1개)."""
        return [replace(p) for p in self.portfolio.positions.values()]

    def candles_frame(self) -> pd.DataFrame:
        """차트용 캔들 DataFrame."""
        return self.history.to_frame()

    # ─── 제어 ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        self.is_running = True
        self.event_log.append(Event.at(self.clock(), "Bot Started."))

    def pause(self) -> None:
        self.is_running = False
        self.event_log.append(Event.at(self.clock(), "Bot Paused."))

    def switch_asset(self, asset: str) -> None:
        """거래 종목 전환. 열린 포지션과 캔들 히스토리는 비우고,
        피드의 종목 상태(마지막 가격, 모멘텀)와 잔고는 그대로 둔다.

        Raises:
            ValueError: 등록되지 않았거나 피드에 시작 가격이 없는 종목 (상태 변경 없음)
        """
        asset_config = get_asset_config(asset)
        self.feed.get_last_price(asset)

        now = self.clock()
        discarded = self.portfolio.discard_positions()
        self.history.clear()
        self.asset = asset
        self.asset_config = asset_config

        for position in discarded:
            self.event_log.append(Event.at(
                now,
                f"Position {position.id} discarded on asset switch (unrealized PnL {position.pnl:.2f})",
                Severity.WARNING,
            ))
        self.event_log.append(Event.at(now, f"Switched Asset to {asset}"))
        logger.info(f"종목 전환: {asset} (포지션 {len(discarded)}개 폐기)")

    def close_position(self, position_id: str) -> ClosedTrade | None:
        """수동 청산. 열린 포지션 id와 일치할 때만 현재 pnl을 잔고에 반영.

        일치하는 포지션이 없으면 (이미 청산된 경우 포함) 아무것도 하지 않고 None 반환.
        """
        now = self.clock()
        trade = self.portfolio.close_position(position_id, REASON_MANUAL, closed_at=now)
        if trade is None:
            logger.info(f"수동 청산 무시: 열린 포지션 아님 ({position_id})")
            return None

        severity = Severity.SUCCESS if trade.pnl > 0 else Severity.WARNING
        self.event_log.append(Event.at(
            now,
            f"Manual Override: Position closed by user. PnL: {trade.pnl:.2f}",
            severity,
        ))
        return trade

    def close(self) -> None:
        """어드바이저 스레드 정리."""
        if self.dispatcher is not None:
            self.dispatcher.close(wait=False)

    # ─── 틱 처리 ──────────────────────────────────────────────────────────

    def tick(self, asset: str | None = None) -> TickResult:
        """한 틱 진행.

        Args:
            asset: 지정하면 현재 종목과 같은지 검증 (다르면 switch_asset() 먼저 호출해야 함)

        Raises:
            ValueError: 현재 종목이 아닌 asset, 또는 피드가 비정상 캔들을 반환 (상태 변경 없음)
        """
        if asset is not None and asset != self.asset:
            raise ValueError(f"현재 종목은 {self.asset}입니다. switch_asset('{asset}')을 먼저 호출하세요.")

        now = self.clock()
        session = self.session_clock.regime_for(self.tick_count)
        volatility = self.session_clock.volatility_multiplier(session)
        bias = self.session_clock.session_bias(session, now)

        candle = self.feed.next_candle(self.asset, self.history.candles(), volatility, bias)
        _validate_candle(candle)

        events: list[Event] = []
        for result in self._drain_advisories():
            events.append(Event.at(now, f"AI Strategy Update: {result}", Severity.ADVISORY))

        self.history.append(candle)
        trend = classify_trend(candle)
        self.trend = trend

        if session != self.session:
            self.session = session
            events.append(Event.at(now, f"Session Change Detected: {session.value}"))
            self._request_advisory(candle, trend)

        closed_trade = self._manage_position(candle, trend, now, events)

        if not self.portfolio.has_open_position:
            self._check_entry(candle, trend, session, now, events)

        account = self.portfolio.snapshot()
        self.equity_curve.append(account.equity)
        self.tick_count += 1
        self.event_log.extend(events)

        position = self.portfolio.open_position
        return TickResult(
            tick=self.tick_count,
            candle=candle,
            trend=trend,
            session=session,
            account=account,
            position=replace(position) if position is not None else None,
            events=events,
            closed_trade=closed_trade,
        )

    def run(self, ticks: int) -> list[TickResult]:
        """ticks번 연속 진행 (대기 없음)."""
        return [self.tick() for _ in range(ticks)]

    def _manage_position(
        self,
        candle: Candle,
        trend: TrendStatus,
        now: float,
        events: list[Event],
    ) -> ClosedTrade | None:
        position = self.portfolio.open_position
        if position is None:
            return None

        decision = self.risk_manager.evaluate(position, candle, trend, self.spread, now=now)
        self.portfolio.replace(decision.position)
        events.extend(decision.events)

        if not decision.should_close:
            return None

        trade = self.portfolio.close_position(position.id, decision.close_reason, closed_at=now)
        severity = Severity.SUCCESS if trade.pnl > 0 else Severity.WARNING
        events.append(Event.at(
            now,
            f"Position Closed [{trade.reason}]: PnL {trade.pnl:.2f}",
            severity,
        ))
        logger.debug(
            f"청산 {trade.side.value} {trade.entry_price:.5f} → {trade.exit_price:.5f} "
            f"({trade.reason}, 트레일링 {trade.trailing_step_count}단계)"
        )
        return trade

    def _check_entry(
        self,
        candle: Candle,
        trend: TrendStatus,
        session: SessionRegime,
        now: float,
        events: list[Event],
    ) -> None:
        context = MarketContext(
            asset=self.asset,
            candle=candle,
            trend=trend,
            session=session,
            spread=self.spread,
        )
        signal = self.strategy.generate_signal(context)
        if signal.signal_type == SignalType.HOLD:
            return

        position = Position(
            id=self._new_position_id(),
            asset=self.asset,
            side=Side.BUY if signal.signal_type == SignalType.BUY else Side.SELL,
            entry_price=signal.price,
            size=signal.size,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
            current_price=signal.price,
            opened_at=now,
        )
        self.portfolio.add_position(position)
        events.append(Event.at(
            now,
            f"Opening {position.side.value}: {signal.reason} @ {signal.price:.2f}",
        ))

    def _request_advisory(self, candle: Candle, trend: TrendStatus) -> None:
        if self.dispatcher is None or len(self.history) < self.advisory_min_history:
            return
        self.dispatcher.submit(AdvisoryRequest(
            asset=self.asset,
            price=candle.close,
            trend=trend,
            rsi=candle.rsi,
            candles=tuple(self.history.tail(ADVISORY_CANDLES)),
        ))

    def _drain_advisories(self) -> list[str]:
        if self.dispatcher is None:
            return []
        return [result.text for result in self.dispatcher.drain()]

    def _new_position_id(self) -> str:
        return "".join(self.rng.choice(POSITION_ID_ALPHABET, size=POSITION_ID_LENGTH))

    # ─── 리포트 ───────────────────────────────────────────────────────────

    def performance(self) -> PerformanceReport:
        return calculate_metrics(
            trade_history=self.portfolio.trade_history,
            equity_curve=self.equity_curve,
            initial_balance=self.portfolio.initial_balance,
            unrealized_pnl=self.portfolio.unrealized_pnl,
        )

    def generate_report(self) -> dict[str, Any]:
        """시뮬레이션 리포트 생성."""
        return {
            "asset": self.asset,
            "ticks": self.tick_count,
            "session": self.session.value,
            "trend": self.trend.value,
            "metrics": self.performance().to_dict(),
            "account": self.portfolio.get_summary(),
            "open_positions": [p.to_dict() for p in self.open_positions()],
            "trades": [
                {
                    "id": t.position_id,
                    "side": t.side.value,
                    "entry": t.entry_price,
                    "exit": t.exit_price,
                    "pnl": t.pnl,
                    "reason": t.reason,
                }
                for t in self.portfolio.trade_history
            ],
        }


def _validate_candle(candle: Candle) -> None:
    values = (candle.open, candle.high, candle.low, candle.close, candle.ma_fast, candle.ma_slow, candle.rsi)
    if not all(math.isfinite(v) for v in values):
        raise ValueError(f"비정상 캔들: {candle}")
