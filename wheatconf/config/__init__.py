"""
설정 관리 모듈

서버 프로세스의 모든 설정을 선언하고, 설정 텍스트를 타입 지정 값으로 파싱/검증하며,
검증된 값을 내부 소비와 런타임 조회/출력에 제공합니다.

주요 구성요소:
    - ConfigRegistry / ConfigEntry: 설정 선언과 이름 조회
    - 밸리데이터: 값 종류별 변환 및 제약 검사
    - load_config_file / apply_config: 설정 적용 파이프라인
    - ServerSettings: 하위 협력자에게 전달되는 설정 컨텍스트
    - format_entry / dump_entries: 설정 출력
"""

from .registry import ARGS_UNBOUNDED, ConfigEntry, ConfigRegistry, default_registry
from .values import ValueKind, EnumOption, EnumTable
from .validators import validator_for
from .loader import apply_config, load_config, load_config_file, fatal_config_error
from .settings import ServerSettings, validate_settings
from .formatter import format_entry, dump_entries, dump_config, print_server_config

__all__ = [
    "ARGS_UNBOUNDED",
    "ConfigEntry",
    "ConfigRegistry",
    "default_registry",
    "ValueKind",
    "EnumOption",
    "EnumTable",
    "validator_for",
    "apply_config",
    "load_config",
    "load_config_file",
    "fatal_config_error",
    "ServerSettings",
    "validate_settings",
    "format_entry",
    "dump_entries",
    "dump_config",
    "print_server_config",
]
