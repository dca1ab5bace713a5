"""
프로세스 로깅 설정

structlog를 표준 logging 위에 구성합니다. 설정 로딩 전에는 기본 수준(NOTICE)으로
부트스트랩하고, 로딩이 끝나면 설정 컨텍스트의 logfile-level과 logfile 값으로
다시 구성합니다.

상세 수준 매핑 (logfile-level → logging):
    DEBUG   → DEBUG
    VERBOSE → INFO
    NOTICE  → INFO
    WARNING → WARNING

사용 예시:
    ```python
    configure_logging()              # 부트스트랩
    # 전체 설정 출력 전에 설정 반영
    settings = load_config_file(path, on_loaded=configure_logging)
    ```
"""

from typing import Optional
import logging
import sys

import structlog

from wheatconf.exceptions import ConfigFileError
from wheatconf.config.settings import ServerSettings

_LEVELS = {
    0: logging.DEBUG,    # DEBUG
    1: logging.INFO,     # VERBOSE
    2: logging.INFO,     # NOTICE
    3: logging.WARNING,  # WARNING
}

DEFAULT_VERBOSE = 2
HANDLER_NAME = "wheatconf"


def log_level_for(verbose: int) -> int:
    """logfile-level 옵션 id를 표준 logging 수준으로 변환"""
    return _LEVELS.get(verbose, logging.INFO)


def configure_logging(settings: Optional[ServerSettings] = None) -> None:
    """
    structlog와 표준 logging 구성

    Args:
        settings: 로딩된 설정 컨텍스트. 없으면 기본 수준으로 표준 에러에 출력

    Raises:
        ConfigFileError: logfile을 열 수 없는 경우
    """
    verbose = settings.verbose if settings else DEFAULT_VERBOSE
    logfile = settings.logfile if settings else None

    handler: logging.Handler
    if logfile:
        try:
            handler = logging.FileHandler(logfile, encoding="utf-8")
        except OSError as e:
            raise ConfigFileError(logfile, str(e)) from e
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))

    # 이전에 추가한 핸들러만 교체하고 다른 핸들러는 유지
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(log_level_for(verbose))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # 설정 로딩 후 재구성되므로 로거를 캐시하지 않음
        cache_logger_on_first_use=False,
    )
