"""
설정 적용 파이프라인

설정 파일 내용과 명령행 오버라이드를 하나의 텍스트로 합친 뒤 줄 단위로
파싱, 이름 조회, 인자 개수 검사, 값 검증을 수행합니다.

처리 순서 (줄마다):
    1. 주석/빈 줄 건너뛰기
    2. (이름, 나머지) 토큰 분리 또는 리스트 블록 인식
    3. 레지스트리에서 이름 조회 (실패 시 치명적 에러)
    4. 값 결정: 리스트 블록, 보정된 나머지 값, 또는 원래 나머지 값
    5. 인자 개수 검사 (불일치 시 치명적 에러)
    6. 밸리데이터 호출 (실패 시 치명적 에러)

첫 번째 실패에서 즉시 중단하며, 이미 반영된 앞선 줄의 값은 되돌리지 않습니다.
모든 줄이 성공하면 ServerSettings로 복사한 뒤 구조 검증을 수행합니다.
설정 에러는 항상 치명적이며, 프로세스 경계에서 fatal_config_error()로 종료합니다.
"""

from pathlib import Path
from typing import Callable, NoReturn, Optional, TextIO
import sys

import structlog

from wheatconf.exceptions import (
    ArityError,
    ConfigError,
    ConfigFileError,
    ConfigLoadError,
    UnknownSettingError,
    render_diagnostic,
)
from wheatconf.config.formatter import print_server_config
from wheatconf.config.parser import (
    LINE_SEPARATOR,
    is_skippable,
    parse_list_block,
    repair_tokens,
    split_lines,
    strip_line,
    tokenize,
)
from wheatconf.config.registry import ConfigRegistry, default_registry
from wheatconf.config.settings import ServerSettings, validate_settings
from wheatconf.config.validators import RawValue
from wheatconf.config.values import ValueKind

logger = structlog.get_logger(__name__)


def _apply_line(
    lines: list[str], index: int, stripped: str, registry: ConfigRegistry
) -> int:
    """한 줄(또는 리스트 블록)을 적용하고 마지막으로 소비한 줄 인덱스 반환"""
    tokens = tokenize(stripped)
    name = tokens[0]

    entry = registry.lookup(name)
    if entry is None:
        raise UnknownSettingError(name)

    last = index
    payload: RawValue
    if len(tokens) == 1 and entry.kind is ValueKind.LIST:
        payload, last = parse_list_block(lines, index)
    else:
        tokens = repair_tokens(tokens, entry.arity)
        payload = tokens[1] if len(tokens) > 1 else ""

    if len(tokens) != entry.arity and not entry.unbounded:
        raise ArityError(name, entry.arity, len(tokens))

    entry.validator.apply(entry, name, payload)
    return last


def apply_config(config: str, registry: ConfigRegistry) -> int:
    """
    설정 텍스트를 레지스트리에 적용

    Args:
        config: 줄바꿈으로 구분된 설정 텍스트
        registry: 값을 반영할 레지스트리

    Returns:
        적용된 설정 줄(리스트 블록은 하나로 계산) 수

    Raises:
        ConfigLoadError: 첫 번째로 실패한 줄의 번호, 원본 줄, 사유 포함
    """
    lines = split_lines(config)
    applied = 0
    index = 0
    while index < len(lines):
        raw_line = lines[index]
        stripped = strip_line(raw_line)
        if is_skippable(stripped):
            index += 1
            continue

        try:
            index = _apply_line(lines, index, stripped, registry)
        except ConfigError as error:
            logger.error(
                "설정 적용 실패", line=index + 1, **error.to_dict()
            )
            raise ConfigLoadError(error, index + 1, raw_line) from error

        applied += 1
        index += 1

    logger.debug("설정 텍스트 적용 완료", lines=len(lines), applied=applied)
    return applied


def load_config(config: str, registry: ConfigRegistry) -> ServerSettings:
    """설정 텍스트 적용 후 설정 컨텍스트 생성 및 구조 검증"""
    apply_config(config, registry)
    settings = ServerSettings.from_registry(registry)
    validate_settings(settings)
    return settings


def read_config_text(filename: str, options: Optional[str] = None) -> str:
    """
    설정 파일 내용과 오버라이드 텍스트 결합

    오버라이드는 파일 내용 뒤에 붙으므로 같은 이름이 있으면 오버라이드가 이깁니다.

    Raises:
        ConfigFileError: 파일을 읽을 수 없는 경우
    """
    config = ""
    if filename:
        try:
            config = Path(filename).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Fatal error, can't open config file", filename=filename)
            raise ConfigFileError(filename, str(e)) from e
    if options:
        config = config + LINE_SEPARATOR + options
    return config


def load_config_file(
    filename: str = "",
    options: Optional[str] = None,
    registry: Optional[ConfigRegistry] = None,
    test: bool = False,
    on_loaded: Optional[Callable[[ServerSettings], None]] = None,
) -> ServerSettings:
    """
    설정 파일과 오버라이드를 읽어 레지스트리에 적용

    Args:
        filename: 설정 파일 경로 (빈 문자열이면 파일 없이 진행)
        options: 명령행 오버라이드 텍스트 (선택사항)
        registry: 값을 반영할 레지스트리 (없으면 기본 레지스트리 생성)
        test: 설정 확인 모드. 전체 설정을 NOTICE 수준으로 출력
        on_loaded: 구조 검증 직후, 전체 설정 출력 전에 호출할 콜백.
            로그 수준과 로그 파일을 먼저 반영해야 출력이 올바른 곳으로 갑니다.

    Returns:
        검증된 서버 설정 컨텍스트
    """
    if registry is None:
        registry = default_registry()
    settings = load_config(read_config_text(filename, options), registry)
    if on_loaded is not None:
        on_loaded(settings)
    print_server_config(registry, test)
    logger.info("설정 로딩 성공", filename=filename or None, test=test)
    return settings


def fatal_config_error(error: ConfigError, stream: Optional[TextIO] = None) -> NoReturn:
    """진단 메시지를 표준 에러로 출력하고 프로세스를 종료 (상태 코드 1)"""
    output = stream if stream is not None else sys.stderr
    output.write(render_diagnostic(error))
    output.flush()
    raise SystemExit(1)
