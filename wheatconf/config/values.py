"""
타입 지정 설정 값 모듈

하나의 설정 값을 표현하는 닫힌 합 타입(closed sum type)을 정의합니다.
각 값은 자신의 종류(ValueKind)를 알고 있으며, 엔트리에 선언된 종류와
항상 일치해야 합니다.

주요 구성요소:
    - ValueKind: 값 종류 열거형 (문자열, 정수, 불리언, 열거형, 리스트)
    - EnumOption / EnumTable: 열거형 설정이 허용하는 (id, name) 목록
    - ConstantString / OwnedString: 컴파일된 상수 문자열과 파서가 만든 문자열
    - IntegerValue, BooleanValue, EnumValue
    - ConstantList / OwnedList: 상수 리스트와 파서가 만든 리스트

소유권 규칙:
    Owned* 값은 엔트리가 소유하며 교체될 때 release()로 해제됩니다.
    Constant* 값은 프로세스 전역 불변 상수이므로 절대 해제하지 않습니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional
import string


_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(text: str) -> str:
    """ASCII 대문자만 소문자로 변환 (유니코드 대소문자 접기 없음)"""
    return text.translate(_ASCII_LOWER)


class ValueKind(Enum):
    """설정 값 종류 (출력 형식도 이 종류로 결정됨)"""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "bool"
    ENUM = "enum"
    LIST = "list"


@dataclass(frozen=True)
class EnumOption:
    """열거형 테이블의 한 항목"""

    id: int
    name: str


class EnumTable:
    """
    열거형 설정의 허용 값 테이블

    항목 순서가 의미를 가집니다. 입력 값을 접두사로 비교할 때
    테이블 순서상 처음 일치하는 항목이 선택되기 때문입니다.
    테이블의 끝이 원래 구현의 빈 이름 센티널 역할을 합니다.
    """

    def __init__(self, name: str, options: tuple[EnumOption, ...]):
        if not options:
            raise ValueError("Enum table must have at least one option")
        self.name = name
        self._options = options

    def __iter__(self) -> Iterator[EnumOption]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __getitem__(self, index: int) -> EnumOption:
        return self._options[index]

    def match(self, text: str) -> Optional[EnumOption]:
        """
        입력이 옵션 이름으로 시작하는 첫 번째 옵션 반환

        옵션 이름 길이만큼만 대소문자 구분 없이 비교하므로
        "warning-only"는 WARNING과 일치하지만 "warn"은 일치하지 않습니다.
        더 긴(구체적인) 옵션이 뒤에 있어도 먼저 일치한 옵션이 이깁니다.
        """
        lowered = ascii_lower(text)
        for option in self._options:
            if lowered.startswith(ascii_lower(option.name)):
                return option
        return None

    def __repr__(self) -> str:
        names = ", ".join(option.name for option in self._options)
        return f"EnumTable({self.name}: {names})"


@dataclass(frozen=True)
class ConstantString:
    """컴파일된 기본 문자열 (해제 금지)"""

    text: Optional[str]

    kind = ValueKind.STRING


@dataclass
class OwnedString:
    """파서가 만든 문자열 값. 교체 시 엔트리가 release() 호출"""

    text: Optional[str]
    released: bool = field(default=False, compare=False)

    kind = ValueKind.STRING

    def release(self) -> None:
        self.text = None
        self.released = True


@dataclass(frozen=True)
class IntegerValue:
    value: int

    kind = ValueKind.INTEGER


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    kind = ValueKind.BOOLEAN


@dataclass(frozen=True)
class EnumValue:
    option: EnumOption

    kind = ValueKind.ENUM


@dataclass(frozen=True)
class ConstantList:
    """컴파일된 기본 리스트 (해제 금지)"""

    items: tuple[str, ...] = ()

    kind = ValueKind.LIST


@dataclass
class OwnedList:
    """리스트 블록에서 수집된 항목들. 교체 시 엔트리가 release() 호출"""

    items: list[str] = field(default_factory=list)
    released: bool = field(default=False, compare=False)

    kind = ValueKind.LIST

    def release(self) -> None:
        self.items.clear()
        self.released = True


# Python 3.12+ 타입 별칭 정의
type StringValue = ConstantString | OwnedString
type ListValue = ConstantList | OwnedList
type TypedValue = StringValue | IntegerValue | BooleanValue | EnumValue | ListValue


def release_if_owned(value: TypedValue) -> None:
    """소유한 값만 해제. 상수 값은 그대로 둠"""
    if isinstance(value, (OwnedString, OwnedList)):
        value.release()


# 로그 상세 수준 (id가 작을수록 상세함)
VERBOSITY_TABLE = EnumTable(
    "verbosity",
    (
        EnumOption(0, "DEBUG"),
        EnumOption(1, "VERBOSE"),
        EnumOption(2, "NOTICE"),
        EnumOption(3, "WARNING"),
    ),
)

# 워커 전략
WORKER_TABLE = EnumTable(
    "worker",
    (
        EnumOption(0, "SyncWorker"),
        EnumOption(1, "AsyncWorker"),
    ),
)
