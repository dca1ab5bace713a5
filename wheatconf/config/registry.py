"""
설정 레지스트리 모듈

서버가 인식하는 모든 설정 엔트리를 선언하고 이름으로 조회하는 기능을 제공합니다.

주요 구성요소:
    - ConfigEntry: 이름, 인자 개수, 값 종류, 기본값, 제약 조건, 현재 값을 가진 설정 슬롯
    - ConfigRegistry: 등록 순서를 유지하는 엔트리 컬렉션
    - default_registry(): 컴파일된 기본 설정 테이블로 채워진 레지스트리 생성

이름 조회 규칙:
    조회 문자열이 저장된 이름의 접두사이면 일치합니다 (대소문자 구분 없음).
    "time"은 "timeout-seconds"와 일치하며, 모호한 접두사는 등록 순서상
    첫 번째 엔트리로 결정되므로 등록 순서가 의미를 가집니다.
    단, 이름 전체가 정확히 일치하는 엔트리가 있으면 그 엔트리가 우선합니다.
"""

from typing import Iterator, Optional

import structlog

from wheatconf.config.validators import Validator, validator_for
from wheatconf.config.values import (
    BooleanValue,
    ConstantList,
    ConstantString,
    EnumTable,
    EnumValue,
    IntegerValue,
    TypedValue,
    ValueKind,
    VERBOSITY_TABLE,
    WORKER_TABLE,
    ascii_lower,
    release_if_owned,
)

logger = structlog.get_logger(__name__)

# 리스트 엔트리처럼 인자 개수 제한이 없음을 나타냄
ARGS_UNBOUNDED = -1

# 컴파일된 기본값
DEFAULT_PROTOCOL = "Http"
DEFAULT_ADDR = "127.0.0.1"
DEFAULT_PORT = 10828
DEFAULT_STATS_ADDR = "127.0.0.1"
DEFAULT_STATS_PORT = 10829
DEFAULT_STAT_REFRESH = 10
DEFAULT_WORKER_TIMEOUT = 30
DEFAULT_MAX_BUFFER_SIZE = 4 * 1024 * 1024
DEFAULT_MBUF_SIZE = 16 * 1024
BUFFER_LIMIT = 1024 * 1024 * 1024


class ConfigEntry:
    """
    하나의 설정 슬롯

    선언된 종류(kind)와 현재 값의 종류는 항상 일치합니다. 문자열/리스트 기본값은
    반드시 상수(Constant*) 값이어야 하며, 파서가 만든 소유 값(Owned*)은
    교체될 때 해제됩니다.

    Attributes:
        name (str): 고유한 설정 이름
        arity (int): 설정 이름을 포함한 토큰 수 또는 ARGS_UNBOUNDED
        kind (ValueKind): 값 종류 (출력 형식 결정)
        default (TypedValue): 컴파일된 기본값
        ceiling (int): 정수 상한 (0이면 제한 없음)
        enum_table (EnumTable | None): 열거형 허용 값 테이블
        value (TypedValue): 현재 값
    """

    def __init__(
        self,
        name: str,
        kind: ValueKind,
        default: TypedValue,
        arity: Optional[int] = None,
        ceiling: int = 0,
        enum_table: Optional[EnumTable] = None,
    ):
        if default.kind is not kind:
            raise ValueError(
                f"Default for '{name}' is {default.kind.value}, expected {kind.value}"
            )
        if kind in (ValueKind.STRING, ValueKind.LIST) and not isinstance(
            default, (ConstantString, ConstantList)
        ):
            raise ValueError(f"Default for '{name}' must be a constant value")
        if ceiling and kind is not ValueKind.INTEGER:
            raise ValueError(f"Only integer entries take a ceiling: '{name}'")
        if kind is ValueKind.ENUM:
            if enum_table is None:
                raise ValueError(f"Enum entry '{name}' requires an enum table")
            if default.option not in enum_table:
                raise ValueError(f"Default for '{name}' is not in {enum_table!r}")

        self.name = name
        self.kind = kind
        self.default = default
        if arity is None:
            arity = ARGS_UNBOUNDED if kind is ValueKind.LIST else 2
        self.arity = arity
        self.ceiling = ceiling
        self.enum_table = enum_table
        self.value: TypedValue = default

    @property
    def validator(self) -> Validator:
        return validator_for(self.kind)

    @property
    def unbounded(self) -> bool:
        return self.arity == ARGS_UNBOUNDED

    def replace(self, value: TypedValue) -> None:
        """현재 값을 교체. 이전 값이 소유 값이면 먼저 해제"""
        if value.kind is not self.kind:
            raise ValueError(
                f"Cannot store {value.kind.value} value in {self.kind.value} entry '{self.name}'"
            )
        previous = self.value
        if previous is not value:
            release_if_owned(previous)
        self.value = value

    def reset(self) -> None:
        self.replace(self.default)

    def __repr__(self) -> str:
        return f"ConfigEntry({self.name!r}, {self.kind.value}, value={self.value!r})"


class ConfigRegistry:
    """
    등록 순서를 유지하는 설정 엔트리 컬렉션

    출력 순서가 결정적이어야 하므로 등록 순서를 그대로 보존합니다.

    사용 예시:
        ```python
        registry = default_registry()
        entry = registry.lookup("worker-number")
        ```
    """

    def __init__(self, entries: Optional[list[ConfigEntry]] = None) -> None:
        self._entries: list[ConfigEntry] = []
        for entry in entries or []:
            self.register(entry)

    def register(self, entry: ConfigEntry) -> None:
        """
        엔트리 등록

        Raises:
            ValueError: 같은 이름(대소문자 무시)이 이미 등록된 경우
        """
        folded = ascii_lower(entry.name)
        if any(ascii_lower(e.name) == folded for e in self._entries):
            raise ValueError(f"Configuration '{entry.name}' is already registered")
        self._entries.append(entry)

    def lookup(self, name: str) -> Optional[ConfigEntry]:
        """
        이름으로 엔트리 조회

        정확히 일치하는 이름을 먼저 찾고, 없으면 조회 문자열이 접두사인
        첫 번째 엔트리를 반환합니다. 빈 문자열은 어떤 엔트리와도 일치하지 않습니다.
        """
        if not name:
            return None
        query = ascii_lower(name)
        for entry in self._entries:
            if ascii_lower(entry.name) == query:
                return entry
        for entry in self._entries:
            if ascii_lower(entry.name).startswith(query):
                return entry
        return None

    def get(self, name: str) -> ConfigEntry:
        """정확한 이름으로 엔트리 조회 (내부 소비자용)"""
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise KeyError(name)

    def reset(self) -> None:
        """모든 엔트리를 컴파일된 기본값으로 복원"""
        for entry in self._entries:
            entry.reset()

    def __iter__(self) -> Iterator[ConfigEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def default_entries() -> list[ConfigEntry]:
    """서버가 인식하는 설정 테이블 (등록 순서 = 출력 순서)"""
    return [
        # 마스터 설정
        ConfigEntry("protocol", ValueKind.STRING, ConstantString(DEFAULT_PROTOCOL)),
        ConfigEntry("bind-addr", ValueKind.STRING, ConstantString(DEFAULT_ADDR)),
        ConfigEntry("port", ValueKind.INTEGER, IntegerValue(DEFAULT_PORT)),
        ConfigEntry(
            "worker-number", ValueKind.INTEGER, IntegerValue(2), ceiling=1024
        ),
        ConfigEntry(
            "worker-type",
            ValueKind.ENUM,
            EnumValue(WORKER_TABLE[0]),
            enum_table=WORKER_TABLE,
        ),
        ConfigEntry("logfile", ValueKind.STRING, ConstantString(None)),
        ConfigEntry(
            "logfile-level",
            ValueKind.ENUM,
            EnumValue(VERBOSITY_TABLE[2]),
            enum_table=VERBOSITY_TABLE,
        ),
        ConfigEntry("daemon", ValueKind.BOOLEAN, BooleanValue(False)),
        ConfigEntry("pidfile", ValueKind.STRING, ConstantString(None)),
        ConfigEntry(
            "max-buffer-size",
            ValueKind.INTEGER,
            IntegerValue(DEFAULT_MAX_BUFFER_SIZE),
            ceiling=BUFFER_LIMIT,
        ),
        # 통계 설정
        ConfigEntry(
            "stat-bind-addr", ValueKind.STRING, ConstantString(DEFAULT_STATS_ADDR)
        ),
        ConfigEntry("stat-port", ValueKind.INTEGER, IntegerValue(DEFAULT_STATS_PORT)),
        ConfigEntry(
            "stat-refresh-time", ValueKind.INTEGER, IntegerValue(DEFAULT_STAT_REFRESH)
        ),
        ConfigEntry("stat-file", ValueKind.STRING, ConstantString(None)),
        ConfigEntry(
            "timeout-seconds",
            ValueKind.INTEGER,
            IntegerValue(DEFAULT_WORKER_TIMEOUT),
            ceiling=300,
        ),
        ConfigEntry(
            "mbuf-size",
            ValueKind.INTEGER,
            IntegerValue(DEFAULT_MBUF_SIZE),
            ceiling=BUFFER_LIMIT,
        ),
    ]


def default_registry() -> ConfigRegistry:
    """컴파일된 기본 테이블로 새 레지스트리 생성"""
    registry = ConfigRegistry(default_entries())
    logger.debug("설정 레지스트리 생성", entries=len(registry))
    return registry
