"""
트레이딩 시뮬레이션 실행 스크립트 (시스템 진입점).

[ 사용법 ]
    # 기본 실행 (config.yaml 설정, 대기 없이 600틱)
    python run_simulation.py

    # 종목/틱 수/seed 지정
    python run_simulation.py --asset BTCUSD --ticks 1000 --seed 42

    # 실시간 모드 (tick_interval초마다 1틱, Ctrl+C로 중지)
    python run_simulation.py --realtime

    # 전략 지정 + 파라미터 오버라이드
    python run_simulation.py --strategy trend_follow -p rsi_overbought=65 -p reward_risk=3

    # 세션 전환 시 규칙 기반 코멘트 출력
    python run_simulation.py --advisor heuristic

    # 등록된 전략 / 종목 목록 확인
    python run_simulation.py --list
"""

import argparse
import time
from pathlib import Path

from sentinel_trader.advisors.local_advisors import HeuristicAdvisor, NullAdvisor
from sentinel_trader.data.assets import get_asset_config, list_assets
from sentinel_trader.simulation.engine import SimulationDriver, TickResult
from sentinel_trader.strategies import list_strategies, strategy_params
from sentinel_trader.utils.config import Config
from sentinel_trader.utils.logger import setup_logger

ADVISORS = {
    "none": None,
    "null": NullAdvisor,
    "heuristic": HeuristicAdvisor,
}


def parse_param(param_str: str) -> tuple[str, object]:
    """'key=value' 문자열을 파싱하여 (key, value) 반환. 숫자면 자동 변환."""
    key, _, value = param_str.partition("=")
    key = key.strip()
    value = value.strip()

    try:
        if "." in value:
            return key, float(value)
        return key, int(value)
    except ValueError:
        if value.lower() in ("true", "yes"):
            return key, True
        if value.lower() in ("false", "no"):
            return key, False
        return key, value


def run_loop(driver: SimulationDriver, ticks: int, interval: float, realtime: bool) -> TickResult | None:
    """고정 주기 틱 루프. 실시간 모드에서는 틱 사이에 interval초 대기.

    틱 결과는 쌓지 않고 마지막 결과만 반환한다 (틱이 없으면 None).
    """
    last = None
    driver.start()
    try:
        for _ in range(ticks):
            if not driver.is_running:
                break
            started = time.monotonic()
            last = driver.tick()
            if realtime:
                time.sleep(max(0.0, interval - (time.monotonic() - started)))
    except KeyboardInterrupt:
        print("\n중지 요청")
    finally:
        driver.pause()
    return last


def print_result(driver: SimulationDriver, last: TickResult | None, event_count: int = 15) -> None:
    """실행 결과 출력."""
    asset_config = driver.asset_config
    print(f"\n[종목: {driver.asset} ({asset_config.name}, {asset_config.leverage}x, "
          f"권장 {asset_config.recommended_timeframe})]")
    if last is not None:
        print(f"진행 틱: {driver.tick_count}, 마지막 가격: {last.candle.close:,.5f}, "
              f"추세: {last.trend.value}, 세션: {last.session.value}")
        print(f"잔고: {last.account.balance:,.2f}, 평가자산: {last.account.equity:,.2f}")

    print(driver.performance().summary())

    for position in driver.open_positions():
        print(f"열린 포지션: {position.side.value} @ {position.entry_price:,.5f} "
              f"SL {position.stop_loss:,.5f} TP {position.take_profit:,.5f} PnL {position.pnl:,.2f}")

    if driver.latest_advisory:
        print(f"\nAI 코멘트: {driver.latest_advisory}")

    print(f"\n최근 이벤트 (최대 {event_count}건):")
    for event in driver.event_log.recent(event_count):
        print(f"  [{event.timestamp}] {event.severity.value:<7} {event.message}")


def main():
    parser = argparse.ArgumentParser(description="트레이딩 에이전트 시뮬레이션 실행")
    parser.add_argument("--config", type=str, default="config.yaml", help="설정 파일 경로")
    parser.add_argument("--asset", type=str, default=None, choices=list_assets(), help="거래 종목")
    parser.add_argument("--ticks", type=int, default=None, help="실행 틱 수")
    parser.add_argument("--seed", type=int, default=None, help="난수 seed (재현용)")
    parser.add_argument("--realtime", action="store_true", help="tick_interval초마다 1틱 진행")
    parser.add_argument("--strategy", type=str, default=None, help="전략 이름 (config.yaml 대신 지정)")
    parser.add_argument("-p", "--param", action="append", default=[], help="전략 파라미터 오버라이드 (예: -p size=2)")
    parser.add_argument("--advisor", type=str, default="none", choices=sorted(ADVISORS), help="세션 전환 코멘트 생성기")
    parser.add_argument("--list", action="store_true", help="등록된 전략/종목 목록 출력")
    args = parser.parse_args()

    if args.list:
        print("등록된 전략:")
        for name in list_strategies():
            params = ", ".join(f"{k}={v}" for k, v in strategy_params(name).items())
            print(f"  - {name}: {params}")
        print("거래 가능 종목:")
        for asset in list_assets():
            cfg = get_asset_config(asset)
            print(f"  - {asset}: {cfg.name} (spread {cfg.spread}, {cfg.recommended_timeframe})")
        return

    # 설정 로드
    config_path = Path(args.config)
    if config_path.exists():
        config = Config.from_yaml(config_path)
    else:
        print(f"설정 파일 없음: {config_path}, 기본값 사용")
        config = Config()

    if args.asset:
        config.simulation.asset = args.asset
    if args.ticks is not None:
        config.simulation.ticks = args.ticks
    if args.seed is not None:
        config.simulation.seed = args.seed
    if args.strategy:
        config.strategy.name = args.strategy
    for p in args.param:
        key, value = parse_param(p)
        config.strategy.params[key] = value

    setup_logger(level=config.log_level, log_dir=config.log_dir, event_level=config.event_log_level)

    advisor_cls = ADVISORS[args.advisor]
    driver = SimulationDriver.from_config(config, advisor=advisor_cls() if advisor_cls else None)

    print(f"\n전략: {config.strategy.name}, 종목: {config.simulation.asset}, 틱: {config.simulation.ticks}")
    try:
        last = run_loop(
            driver,
            ticks=config.simulation.ticks,
            interval=config.simulation.tick_interval,
            realtime=args.realtime,
        )
    finally:
        driver.close()

    print_result(driver, last)


if __name__ == "__main__":
    main()
