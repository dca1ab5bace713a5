"""
설정 값 밸리데이터 모듈

값 종류마다 하나의 밸리데이터 클래스를 제공합니다. 각 밸리데이터는
파서가 분리한 원본 토큰을 타입 지정 값으로 변환하고, 엔트리의 제약 조건
(정수 상한, 열거형 테이블)을 검사한 뒤 성공 시에만 엔트리에 값을 반영합니다.

밸리데이터는 엔트리에 저장된 함수 참조가 아니라 엔트리의 선언된 종류(ValueKind)로
선택됩니다:

    validator = validator_for(entry.kind)
    validator.apply(entry, "worker-number", "5")

실패 시 ConfigValidationError가 발생하며 엔트리는 변경되지 않습니다.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
import string

import structlog

from wheatconf.exceptions import ConfigValidationError
from wheatconf.config.values import (
    BooleanValue,
    EnumValue,
    IntegerValue,
    OwnedList,
    OwnedString,
    TypedValue,
    ValueKind,
    ascii_lower,
)

if TYPE_CHECKING:
    from wheatconf.config.registry import ConfigEntry

logger = structlog.get_logger(__name__)

# 문자열 "값 없음" 센티널 (대소문자 구분 없음)
NULL_LITERAL = "NULL"

# 정수 자릿수 상한 (오버플로 방지)
MAX_INTEGER_DIGITS = 10

type RawValue = str | list[str]


class Validator(ABC):
    """
    모든 밸리데이터의 추상 기본 클래스

    하위 클래스는 convert()만 구현합니다. apply()는 변환에 성공한 값만
    엔트리에 반영하므로 실패한 검증은 어떤 변경도 남기지 않습니다.
    """

    kind: ValueKind

    @abstractmethod
    def convert(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        """
        원본 값을 타입 지정 값으로 변환

        Args:
            entry: 제약 조건을 가진 대상 엔트리
            key: 진단용 설정 이름 (사용자가 입력한 그대로)
            raw: 파서가 분리한 원본 값 (리스트 블록이면 문자열 리스트)

        Raises:
            ConfigValidationError: 값이 허용되지 않는 경우
        """

    def apply(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        """변환 후 엔트리에 반영하고 반영된 값을 반환"""
        value = self.convert(entry, key, raw)
        entry.replace(value)
        logger.debug("설정 값 반영", name=entry.name, key=key, kind=self.kind.value)
        return value

    @staticmethod
    def _require_text(key: str, raw: RawValue) -> str:
        if not isinstance(raw, str):
            raise ConfigValidationError(
                f"'{key}' expects a single value, got a list block", field=key
            )
        return raw


class StringValidator(Validator):
    """NULL 리터럴은 값 없음, 그 외에는 소유 문자열로 복사"""

    kind = ValueKind.STRING

    def convert(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        text = self._require_text(key, raw)
        if ascii_lower(text) == ascii_lower(NULL_LITERAL):
            return OwnedString(None)
        return OwnedString(text)


class BooleanValidator(Validator):
    """정확히 "on" / "off" 만 허용"""

    kind = ValueKind.BOOLEAN

    def convert(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        text = self._require_text(key, raw)
        if text == "on":
            return BooleanValue(True)
        if text == "off":
            return BooleanValue(False)
        raise ConfigValidationError(
            f"'{key}' must be 'on' or 'off'", field=key, value=text
        )


class IntegerValidator(Validator):
    """
    부호 없는 정수 밸리데이터

    ASCII 숫자만 허용하고 10자리를 넘으면 값과 관계없이 거부합니다.
    엔트리에 0이 아닌 상한이 있으면 변환된 값이 상한을 넘을 때 거부합니다.
    """

    kind = ValueKind.INTEGER

    def convert(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        text = self._require_text(key, raw)
        if not text:
            raise ConfigValidationError(f"'{key}' requires a number", field=key)

        for position, char in enumerate(text):
            if char not in string.digits:
                raise ConfigValidationError(
                    f"'{key}' must be an unsigned integer", field=key, value=text
                )
            if position >= MAX_INTEGER_DIGITS:
                raise ConfigValidationError(
                    f"'{key}' has more than {MAX_INTEGER_DIGITS} digits",
                    field=key,
                    value=text,
                )

        value = int(text)
        if entry.ceiling and value > entry.ceiling:
            raise ConfigValidationError(
                f"'{key}' exceeds limit {entry.ceiling}",
                field=key,
                value=text,
                data={"ceiling": entry.ceiling},
            )
        return IntegerValue(value)


class EnumValidator(Validator):
    """테이블 순서상 입력의 접두사가 되는 첫 번째 옵션 선택"""

    kind = ValueKind.ENUM

    def convert(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        text = self._require_text(key, raw)
        table = entry.enum_table
        if table is None:
            raise ConfigValidationError(f"'{key}' has no enum table", field=key)

        option = table.match(text)
        if option is None:
            raise ConfigValidationError(
                f"'{key}' must be one of {', '.join(o.name for o in table)}",
                field=key,
                value=text,
            )
        return EnumValue(option)


class ListValidator(Validator):
    """파서가 만든 리스트를 그대로 채택. 이전 소유 리스트는 엔트리가 해제"""

    kind = ValueKind.LIST

    def convert(self, entry: "ConfigEntry", key: str, raw: RawValue) -> TypedValue:
        if not isinstance(raw, list):
            raise ConfigValidationError(
                f"'{key}' expects a list block", field=key, value=raw
            )
        return OwnedList(list(raw))


_VALIDATORS: dict[ValueKind, Validator] = {
    validator.kind: validator
    for validator in (
        StringValidator(),
        BooleanValidator(),
        IntegerValidator(),
        EnumValidator(),
        ListValidator(),
    )
}


def validator_for(kind: ValueKind) -> Validator:
    """값 종류에 해당하는 밸리데이터 반환"""
    return _VALIDATORS[kind]
