"""
설정 관리 모듈.

[ 역할 ]
    config.yaml (또는 .json) 파일을 파싱하여 Config 객체로 변환.
    시뮬레이션, 세션, 리스크, 전략 파라미터와 로깅 설정을 통합 관리.

[ 설정 파일 구조 (config.yaml) ]
    simulation:       → SimulationConfig (종목, 초기 잔고, seed, 틱 수 등)
    session:          → SessionConfig (세션 구간, 변동성 배수, 바이어스 주기)
    risk:             → RiskConfig (추세 무효화 버퍼, 트레일링 단계)
    strategy:         → StrategyConfig (전략 이름 + 파라미터)
    log_level:        → "INFO" / "DEBUG"
    event_log_level:  → 이벤트 로그 미러 레벨 (비우면 log_level을 따름)
    log_dir:          → 로그 디렉토리 경로

[ 호출하는 곳 ]
    - run_simulation.py에서 Config.from_yaml()로 로드
    - simulation/engine.py::SimulationDriver.from_config()
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class SimulationConfig:
    """시뮬레이션 설정. config.yaml의 simulation 섹션에 대응."""
    asset: str = "XAUUSD"
    initial_balance: float = 10_000
    seed: int | None = None          # None이면 매 실행마다 다른 캔들
    ticks: int = 600                 # run_simulation.py 실행 틱 수
    tick_interval: float = 1.0       # 실시간 모드 틱 간격 (초)
    history_size: int = 60           # 캔들 히스토리 용량
    event_log_size: int = 50         # 이벤트 로그 용량


@dataclass
class SessionConfig:
    """세션 설정. config.yaml의 session 섹션에 대응."""
    cycle_length: int = 300
    asian_end: int = 100
    london_end: int = 200
    asian_volatility: float = 0.5
    active_volatility: float = 2.0
    bias_period: float = 10.0        # 초
    advisory_min_history: int = 20   # 어드바이저 호출 최소 캔들 수


@dataclass
class RiskConfig:
    """리스크 설정. config.yaml의 risk 섹션에 대응. 모두 spread 배수."""
    invalidation_spread_multiple: float = 5.0
    trail_step_multiple: float = 20.0
    trail_secure_multiple: float = 10.0


@dataclass
class StrategyConfig:
    """전략 설정. config.yaml의 strategy 섹션에 대응.

    각 전략 클래스의 DEFAULT_PARAMS가 기본값 역할을 하므로,
    여기서는 오버라이드할 값만 지정하면 된다.
    """
    name: str = "session"
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Config:
    """전체 설정. from_yaml() 또는 from_json()으로 파일에서 로드."""
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    risk: RiskConfig = field(default_factory=RiskConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    log_level: str = "INFO"
    event_log_level: str | None = None
    log_dir: str = "logs"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """YAML 파일에서 설정 로드."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "Config":
        """JSON 파일에서 설정 로드."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """딕셔너리에서 Config 생성. 섹션 안의 모르는 키는 무시."""
        strategy_data = data.get("strategy") or {}

        # strategy 섹션: params가 명시적으로 있으면 그것을, 없으면 name 외 나머지를 params로
        if "params" in strategy_data:
            strategy_params = dict(strategy_data["params"] or {})
        else:
            strategy_params = {k: v for k, v in strategy_data.items() if k != "name"}

        return cls(
            simulation=_section(SimulationConfig, data.get("simulation")),
            session=_section(SessionConfig, data.get("session")),
            risk=_section(RiskConfig, data.get("risk")),
            strategy=StrategyConfig(
                name=strategy_data.get("name", "session"),
                params=strategy_params,
            ),
            log_level=data.get("log_level", "INFO"),
            event_log_level=data.get("event_log_level"),
            log_dir=data.get("log_dir", "logs"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환."""
        return asdict(self)

    def save_yaml(self, path: str | Path) -> None:
        """YAML 파일로 저장."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, allow_unicode=True, default_flow_style=False)


def _section(section_cls, data: dict[str, Any] | None):
    data = data or {}
    return section_cls(**{
        k: v for k, v in data.items()
        if k in section_cls.__dataclass_fields__
    })
