"""
테스트 공용 헬퍼.

    make_candle()     - 지표값을 직접 지정한 캔들 생성
    ScriptedFeed      - 정해진 캔들을 순서대로 돌려주는 PriceFeed
    ImmediateExecutor - submit 즉시 같은 스레드에서 실행하는 Executor
    DeferredExecutor  - run_all() 호출 전까지 실행을 미루는 Executor
"""
from concurrent.futures import Executor, Future

import pytest

from sentinel_trader.core.market_data import Candle, PriceFeed

FIXED_NOW = 1_700_000_000.0


def make_candle(
    close: float,
    ma_fast: float | None = None,
    ma_slow: float | None = None,
    rsi: float = 50.0,
    high: float | None = None,
    low: float | None = None,
    open_: float | None = None,
) -> Candle:
    return Candle(
        time="00:00:00",
        open=close if open_ is None else open_,
        high=close if high is None else high,
        low=close if low is None else low,
        close=close,
        ma_fast=close if ma_fast is None else ma_fast,
        ma_slow=close if ma_slow is None else ma_slow,
        rsi=rsi,
    )


class ScriptedFeed(PriceFeed):
    """캔들 리스트를 순서대로 반환."""

    def __init__(self, candles, last_prices=None):
        self._candles = list(candles)
        self.calls = []
        self.last_prices = dict(last_prices or {"XAUUSD": 2350.0, "BTCUSD": 65000.0, "EURUSD": 1.08})

    def next_candle(self, asset, history, volatility_multiplier, session_bias):
        self.calls.append((asset, len(history), volatility_multiplier, session_bias))
        candle = self._candles.pop(0)
        self.last_prices[asset] = candle.close
        return candle

    def get_last_price(self, asset):
        if asset not in self.last_prices:
            raise ValueError(asset)
        return self.last_prices[asset]


class ImmediateExecutor(Executor):
    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


class DeferredExecutor(Executor):
    def __init__(self):
        self.pending = []

    def submit(self, fn, /, *args, **kwargs):
        self.pending.append((fn, args, kwargs))
        return Future()

    def run_all(self, reverse: bool = False):
        jobs = list(reversed(self.pending)) if reverse else list(self.pending)
        self.pending.clear()
        for fn, args, kwargs in jobs:
            fn(*args, **kwargs)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
