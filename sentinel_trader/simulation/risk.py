"""
리스크 관리 모듈.

[ 역할 ]
    매 틱 열린 포지션 1개에 대해 평가손익 갱신, 청산 조건 판단, 트레일링 스탑 조정을 수행.
    포지션을 직접 수정하지 않고 갱신된 Position 사본 + 청산 사유를 RiskDecision으로 돌려준다.
    실제 청산(잔고 반영)은 simulation/engine.py가 Portfolio를 통해 실행.

[ 판단 순서 ]
    1. 평가: pnl, current_price 갱신
    2. 고정 손절/익절: BUY는 close <= SL → "SL Hit", close >= TP → "TP Hit" (SELL은 반대)
    3. 추세 무효화: BUY인데 close < MA7 - 5*spread 이고 추세 DOWN → "Trend Invalidated (Early Exit)"
       (SELL은 반대). 같은 틱의 SL/TP 사유를 덮어쓴다.
    4. 계단식 트레일링: 수익이 20*spread 단위로 늘 때마다 SL을 진입가 ± 단계수*10*spread로 이동.
       SL은 수익 방향으로만 움직인다. 청산 사유가 정해진 틱에도 실행된다.
    5. 청산 사유가 있으면 엔진이 청산

[ 파라미터 (config.yaml의 risk 섹션에서 로드) ]
    invalidation_spread_multiple: 추세 무효화 버퍼 (spread 배수)
    trail_step_multiple:          트레일링 1단계 수익 거리 (spread 배수)
    trail_secure_multiple:        단계당 확보하는 SL 거리 (spread 배수)
"""

import logging
import math
from dataclasses import dataclass, field, replace

from sentinel_trader.core.market_data import Candle, TrendStatus
from sentinel_trader.data.portfolio import Position, Side
from sentinel_trader.simulation.events import Event, Severity

logger = logging.getLogger("sentinel_trader.risk")

REASON_STOP_LOSS = "SL Hit"
REASON_TAKE_PROFIT = "TP Hit"
REASON_TREND_INVALIDATED = "Trend Invalidated (Early Exit)"
REASON_MANUAL = "Manual Override"


@dataclass
class RiskDecision:
    """evaluate()의 반환값."""
    position: Position                  # 갱신된 포지션 (트레일링 반영)
    close_reason: str | None = None     # None이면 유지
    events: list[Event] = field(default_factory=list)

    @property
    def should_close(self) -> bool:
        return self.close_reason is not None


class RiskManager:
    """포지션 리스크 관리자."""

    def __init__(
        self,
        invalidation_spread_multiple: float = 5.0,
        trail_step_multiple: float = 20.0,
        trail_secure_multiple: float = 10.0,
    ):
        self.invalidation_spread_multiple = invalidation_spread_multiple
        self.trail_step_multiple = trail_step_multiple
        self.trail_secure_multiple = trail_secure_multiple

    def evaluate(
        self,
        position: Position,
        candle: Candle,
        trend: TrendStatus,
        spread: float,
        now: float = 0.0,
    ) -> RiskDecision:
        """열린 포지션 1개 평가.

        Args:
            position: 현재 열린 포지션 (수정하지 않음)
            candle: 이번 틱 캔들
            trend: 이번 틱 추세
            spread: 종목 스프레드
            now: 이벤트 타임스탬프용 epoch 초
        """
        price = candle.close
        updated = replace(position, current_price=price, pnl=position.mark(price))

        reason = self._static_exit(updated, price)
        if self._trend_invalidated(updated, candle, trend, spread):
            reason = REASON_TREND_INVALIDATED

        events: list[Event] = []
        trailed = self._trail_stop(updated, price, spread)
        if trailed is not None:
            updated = trailed
            events.append(Event.at(
                now,
                f"Trailing Stop Activated: Locked profit at {updated.stop_loss:.2f}",
                Severity.SUCCESS,
            ))
            logger.debug(
                f"트레일링 스탑 {position.stop_loss:.5f} → {updated.stop_loss:.5f} "
                f"(단계 {updated.trailing_step_count})"
            )

        return RiskDecision(position=updated, close_reason=reason, events=events)

    def _static_exit(self, position: Position, price: float) -> str | None:
        reason = None
        if position.side == Side.BUY:
            if price <= position.stop_loss:
                reason = REASON_STOP_LOSS
            if price >= position.take_profit:
                reason = REASON_TAKE_PROFIT
        else:
            if price >= position.stop_loss:
                reason = REASON_STOP_LOSS
            if price <= position.take_profit:
                reason = REASON_TAKE_PROFIT
        return reason

    def _trend_invalidated(
        self,
        position: Position,
        candle: Candle,
        trend: TrendStatus,
        spread: float,
    ) -> bool:
        buffer = spread * self.invalidation_spread_multiple
        if position.side == Side.BUY:
            return candle.close < candle.ma_fast - buffer and trend == TrendStatus.DOWN
        return candle.close > candle.ma_fast + buffer and trend == TrendStatus.UP

    def _trail_stop(self, position: Position, price: float, spread: float) -> Position | None:
        """트레일링 스탑 조정. 조정이 없으면 None."""
        step_size = spread * self.trail_step_multiple
        secure_step = spread * self.trail_secure_multiple
        if step_size <= 0:
            return None

        if position.side == Side.BUY:
            steps_taken = math.floor((price - position.entry_price) / step_size)
            if steps_taken <= position.trailing_step_count:
                return None
            new_sl = position.entry_price + steps_taken * secure_step
            if new_sl <= position.stop_loss:
                return None
        else:
            steps_taken = math.floor((position.entry_price - price) / step_size)
            if steps_taken <= position.trailing_step_count:
                return None
            new_sl = position.entry_price - steps_taken * secure_step
            if new_sl >= position.stop_loss:
                return None

        return replace(position, stop_loss=new_sl, trailing_step_count=steps_taken)
