"""
로깅 모듈.

[ 역할 ]
    파일 + 콘솔 로거를 설정. 진입/청산/트레일링 이벤트, 세션 전환, 어드바이저 실패 등을 기록.
    하위 로거("sentinel_trader.engine", "sentinel_trader.events" 등)는 이 로거로 전파된다.

[ 이벤트 로그 레벨 ]
    EventLog에 쌓이는 이벤트는 "sentinel_trader.events" 로거로도 나간다 (틱마다 여러 줄).
    event_level로 이 하위 로거만 따로 조절한다.
        예) level="DEBUG", event_level="WARNING" → 엔진 디버그는 보고 청산 손실/경고 이벤트만 출력

[ 로그 파일 위치 ]
    {log_dir}/{name}_{YYYYMMDD}.log (예: logs/sentinel_trader_20240601.log)
    log_dir가 None이면 파일 핸들러 없이 콘솔만 사용.

[ 호출하는 곳 ]
    - run_simulation.py에서 config.yaml의 log_level / event_log_level / log_dir로 호출
    - 각 모듈은 logging.getLogger("sentinel_trader.<영역>") 사용
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

EVENTS_LOGGER_SUFFIX = "events"


def setup_logger(
    name: str = "sentinel_trader",
    level: str = "INFO",
    log_dir: str | None = "logs",
    console: bool = True,
    event_level: str | None = None,
) -> logging.Logger:
    """로거 설정. 파일 핸들러(일별) + 콘솔 핸들러 등록.

    레벨은 매번 다시 적용하고, 핸들러는 처음 한 번만 붙인다.

    Args:
        name: 최상위 로거 이름
        level: 최상위 로거 레벨 ("DEBUG", "INFO", ...)
        log_dir: 로그 파일 디렉토리 (None이면 파일 없음)
        console: stdout 출력 여부
        event_level: "{name}.events" 하위 로거 레벨 (None이면 최상위 레벨을 따름)

    Raises:
        ValueError: 알 수 없는 레벨 이름
    """
    logger = logging.getLogger(name)
    logger.setLevel(_parse_level(level))

    events_logger = logging.getLogger(f"{name}.{EVENTS_LOGGER_SUFFIX}")
    events_logger.setLevel(_parse_level(event_level) if event_level else logging.NOTSET)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime("%Y%m%d")
        file_handler = logging.FileHandler(log_path / f"{name}_{today}.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"알 수 없는 로그 레벨: {level}")
    return value
