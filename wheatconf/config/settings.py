"""
서버 설정 컨텍스트

검증이 끝난 레지스트리 값을 평평한(flat) 불변 객체로 복사합니다.
로깅, 워커 관리자, 통계 서브시스템 같은 하위 협력자는 레지스트리를 순회하지 않고
이 객체를 전달받아 필요한 값을 바로 읽습니다.

사용 예시:
    settings = ServerSettings.from_registry(registry)
    validate_settings(settings)
    configure_logging(settings)
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import structlog

from wheatconf.exceptions import ConfigConsistencyError
from wheatconf.config.registry import ConfigRegistry
from wheatconf.config.values import (
    BooleanValue,
    ConstantString,
    EnumValue,
    IntegerValue,
    OwnedString,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ServerSettings:
    """
    로딩이 끝난 서버 설정

    worker_type은 열거형 옵션 이름, verbose는 열거형 옵션 id를 담습니다.
    """

    protocol: Optional[str]
    bind_addr: Optional[str]
    port: int
    worker_number: int
    worker_type: str
    logfile: Optional[str]
    verbose: int
    daemon: bool
    pidfile: Optional[str]
    max_buffer_size: int
    stat_addr: Optional[str]
    stat_port: int
    stat_refresh_seconds: int
    stat_file: Optional[str]
    worker_timeout: int
    mbuf_size: int

    @classmethod
    def from_registry(cls, registry: ConfigRegistry) -> "ServerSettings":
        """
        레지스트리에서 설정 컨텍스트 생성

        테이블 위치가 아니라 정확한 설정 이름으로 값을 읽으므로
        엔트리 순서가 바뀌어도 안전합니다.
        """

        def text(name: str) -> Optional[str]:
            value = registry.get(name).value
            if isinstance(value, (ConstantString, OwnedString)):
                return value.text
            raise TypeError(f"'{name}' is not a string setting")

        def number(name: str) -> int:
            value = registry.get(name).value
            if isinstance(value, IntegerValue):
                return value.value
            raise TypeError(f"'{name}' is not an integer setting")

        def flag(name: str) -> bool:
            value = registry.get(name).value
            if isinstance(value, BooleanValue):
                return value.value
            raise TypeError(f"'{name}' is not a boolean setting")

        def option(name: str) -> EnumValue:
            value = registry.get(name).value
            if isinstance(value, EnumValue):
                return value
            raise TypeError(f"'{name}' is not an enum setting")

        return cls(
            protocol=text("protocol"),
            bind_addr=text("bind-addr"),
            port=number("port"),
            worker_number=number("worker-number"),
            worker_type=option("worker-type").option.name,
            logfile=text("logfile"),
            verbose=option("logfile-level").option.id,
            daemon=flag("daemon"),
            pidfile=text("pidfile"),
            max_buffer_size=number("max-buffer-size"),
            stat_addr=text("stat-bind-addr"),
            stat_port=number("stat-port"),
            stat_refresh_seconds=number("stat-refresh-time"),
            stat_file=text("stat-file"),
            worker_timeout=number("timeout-seconds"),
            mbuf_size=number("mbuf-size"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_settings(settings: ServerSettings) -> None:
    """
    로딩 후 구조 검증

    - 통계 갱신 주기는 워커 타임아웃보다 반드시 작아야 함
    - 서비스 포트와 통계 포트는 0이 아니어야 함

    Raises:
        ConfigConsistencyError: 조건을 만족하지 않는 경우
    """
    if settings.stat_refresh_seconds >= settings.worker_timeout:
        raise ConfigConsistencyError(
            f"stat-refresh-time ({settings.stat_refresh_seconds}) must be less "
            f"than timeout-seconds ({settings.worker_timeout})",
            data={
                "stat_refresh_seconds": settings.stat_refresh_seconds,
                "worker_timeout": settings.worker_timeout,
            },
        )
    if not settings.port or not settings.stat_port:
        raise ConfigConsistencyError(
            "port and stat-port must be nonzero",
            data={"port": settings.port, "stat_port": settings.stat_port},
        )
    logger.debug("설정 구조 검증 성공")
