"""
설정 출력 포매터

엔트리의 현재 값을 "name: value" 형식의 한 줄로 렌더링합니다.
런타임 "설정 조회" 명령과 시작 시 전체 설정 덤프에 사용됩니다.

출력 규칙:
    - 문자열, 열거형: 값 그대로 (값 없는 문자열은 NULL)
    - 정수, 불리언: 10진수 (불리언은 1/0)
    - 리스트: "name: " 다음에 항목마다 "항목\t"

출력은 응답 버퍼 크기(기본 255)를 넘지 않습니다. 리스트는 들어가지 않는 첫 항목
앞에서 멈추고 그때까지 쓴 내용을 반환합니다.

설정 파일로 다시 읽을 수 있는 형식(on/off, NULL, 리스트 블록)이 필요하면
canonical_text()와 dump_config()를 사용합니다.
"""

from typing import assert_never

import structlog

from wheatconf.config.registry import ConfigEntry, ConfigRegistry
from wheatconf.config.validators import NULL_LITERAL
from wheatconf.config.parser import LIST_MARKER
from wheatconf.config.values import (
    BooleanValue,
    ConstantList,
    ConstantString,
    EnumValue,
    IntegerValue,
    OwnedList,
    OwnedString,
    TypedValue,
    ValueKind,
)

logger = structlog.get_logger(__name__)

# 응답 버퍼 크기 (종료 문자 포함)
CONFIG_LINE_MAX = 255

BANNER_START = "---- Now Configuration are ----"
BANNER_END = "-------------------------------"


def render_value(value: TypedValue) -> str:
    """스칼라 값의 표시용 문자열"""
    if isinstance(value, (ConstantString, OwnedString)):
        return value.text if value.text is not None else NULL_LITERAL
    if isinstance(value, IntegerValue):
        return str(value.value)
    if isinstance(value, BooleanValue):
        return str(int(value.value))
    if isinstance(value, EnumValue):
        return value.option.name
    if isinstance(value, (ConstantList, OwnedList)):
        return "".join(f"{item}\t" for item in value.items)
    assert_never(value)


def format_entry(entry: ConfigEntry, limit: int = CONFIG_LINE_MAX) -> str:
    """
    엔트리를 "name: value" 한 줄로 렌더링

    Args:
        entry: 출력할 엔트리
        limit: 버퍼 크기. 결과는 최대 limit - 1 글자

    Returns:
        렌더링된 줄 (버퍼가 작으면 잘린 결과)
    """
    capacity = max(limit - 1, 0)
    head = f"{entry.name}: "
    value = entry.value

    if not isinstance(value, (ConstantList, OwnedList)):
        return (head + render_value(value))[:capacity]

    if len(head) > capacity:
        return head[:capacity]
    written = head
    for item in value.items:
        piece = f"{item}\t"
        if len(written) + len(piece) > capacity:
            break
        written += piece
    return written


def dump_entries(registry: ConfigRegistry, limit: int = CONFIG_LINE_MAX) -> list[str]:
    """배너 줄 사이에 모든 엔트리를 등록 순서대로 렌더링"""
    lines = [BANNER_START]
    lines.extend(format_entry(entry, limit) for entry in registry)
    lines.append(BANNER_END)
    return lines


def print_server_config(registry: ConfigRegistry, test: bool = False) -> None:
    """
    현재 설정 전체를 로그로 출력

    테스트 모드(설정 확인용 실행)에서는 NOTICE 수준, 평소에는 DEBUG 수준으로
    출력합니다.
    """
    emit = logger.info if test else logger.debug
    for line in dump_entries(registry):
        emit(line)


def canonical_text(value: TypedValue) -> str:
    """
    값을 설정 언어 문법으로 렌더링

    format_entry()와 달리 불리언은 on/off, 리스트는 "- 항목" 블록으로
    출력하므로 결과를 다시 로딩하면 같은 값이 됩니다.
    """
    if isinstance(value, (ConstantString, OwnedString)):
        return value.text if value.text is not None else NULL_LITERAL
    if isinstance(value, IntegerValue):
        return str(value.value)
    if isinstance(value, BooleanValue):
        return "on" if value.value else "off"
    if isinstance(value, EnumValue):
        return value.option.name
    if isinstance(value, (ConstantList, OwnedList)):
        return "\n".join(f"{LIST_MARKER} {item}" for item in value.items)
    assert_never(value)


def dump_config(registry: ConfigRegistry) -> str:
    """현재 레지스트리를 다시 로딩 가능한 설정 텍스트로 출력"""
    lines = []
    for entry in registry:
        if entry.kind is ValueKind.LIST:
            lines.append(entry.name)
            block = canonical_text(entry.value)
            if block:
                lines.append(block)
        else:
            lines.append(f"{entry.name} {canonical_text(entry.value)}")
    return "\n".join(lines) + "\n"
