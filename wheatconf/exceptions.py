"""
설정 로딩 예외 모듈

이 모듈은 설정 파일 로딩 과정에서 발생할 수 있는 모든 예외를 정의합니다.
모든 설정 오류는 치명적(fatal)이며, 첫 번째 오류에서 로딩이 중단됩니다.

주요 구성요소:
    - ErrorCode: 실패 종류별 에러 코드와 사유 문자열
    - ConfigError: 모든 설정 예외의 기본 클래스
    - 구체적인 예외 클래스들: 알 수 없는 이름, 인자 개수, 값 검증, 구조 검증 등
    - ConfigLoadError: 줄 번호와 원본 줄을 포함한 치명적 진단 메시지

진단 메시지 형식:
    *** FATAL CONFIG FILE ERROR ***
    Reading the configuration file, at line <n>
    >>> '<원본 줄>'
    Reason: <사유>
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(Enum):
    """
    설정 에러 코드 열거형

    각 코드의 값은 진단 메시지의 "Reason:" 줄에 그대로 출력되는 사유 문자열입니다.
    """

    UNKNOWN_NAME = "Unknown configuration name"   # 등록되지 않은 설정 이름
    INCORRECT_ARGS = "Incorrect args"             # 인자 개수 불일치
    VALIDATE_FAILED = "Validate Failed"           # 값 검증 실패
    INCONSISTENT = "Inconsistent configuration"   # 로딩 후 구조 검증 실패
    FILE_ERROR = "Can't open config file"         # 설정 파일 읽기 실패


class ConfigError(Exception):
    """
    모든 설정 에러의 기본 예외 클래스

    Attributes:
        message (str): 에러 메시지
        code (ErrorCode): 에러 코드
        data (dict): 추가 에러 정보 (선택사항)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATE_FAILED,
        data: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: 사용자에게 표시될 에러 메시지
            code: 에러 코드 (기본값: VALIDATE_FAILED)
            data: 디버깅에 유용한 추가 정보 (선택사항)
        """
        self.message = message
        self.code = code
        self.data = data or {}
        super().__init__(message)

    @property
    def reason(self) -> str:
        """진단 메시지에 출력할 짧은 사유 코드"""
        return self.code.value

    def to_dict(self) -> Dict[str, Any]:
        """
        에러를 구조화된 로그용 딕셔너리로 변환

        data 필드는 값이 있을 때만 포함됩니다.
        """
        error_dict = {
            "code": self.code.name,
            "reason": self.reason,
            "message": self.message
        }
        if self.data:
            error_dict["data"] = self.data
        return error_dict


class UnknownSettingError(ConfigError):
    """레지스트리에서 찾을 수 없는 설정 이름"""

    def __init__(self, name: str):
        super().__init__(
            message=f"Unknown configuration name: {name}",
            code=ErrorCode.UNKNOWN_NAME,
            data={"name": name}
        )


class ArityError(ConfigError):
    """
    인자 개수 불일치 에러

    설정 이름을 포함한 토큰 수가 엔트리에 선언된 개수와 다를 때 발생합니다.
    """

    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(
            message=f"'{name}' expects {expected} args, got {actual}",
            code=ErrorCode.INCORRECT_ARGS,
            data={"name": name, "expected": expected, "actual": actual}
        )


class ConfigValidationError(ConfigError):
    """
    값 검증 실패 에러

    밸리데이터가 원본 값을 거부했을 때 발생합니다.
    정수의 숫자 외 문자, 자릿수 초과, 상한 초과, 불리언 리터럴 불일치,
    열거형 접두사 불일치, 잘못된 리스트 값 등이 모두 이 에러로 표현됩니다.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: 종류별 상세 메시지
            field: 검증에 실패한 설정 이름 (선택사항)
            value: 잘못된 값 (선택사항)
            data: 추가 정보 (예: 상한값, 허용 리터럴 등)
        """
        if data is None:
            data = {}
        if field:
            data["field"] = field
        if value is not None:
            # 긴 값은 100자로 잘라서 로그에 과도한 데이터 방지
            data["value"] = str(value)[:100]

        super().__init__(
            message=message,
            code=ErrorCode.VALIDATE_FAILED,
            data=data
        )


class ConfigConsistencyError(ConfigError):
    """
    로딩 후 구조 검증 실패 에러

    모든 줄이 검증된 뒤 설정 간 관계(예: 통계 갱신 주기 < 워커 타임아웃)가
    맞지 않을 때 발생합니다.
    """

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=ErrorCode.INCONSISTENT,
            data=data
        )


class ConfigFileError(ConfigError):
    """설정 파일을 열거나 읽을 수 없음"""

    def __init__(self, filename: str, detail: Optional[str] = None):
        data = {"filename": filename}
        if detail:
            data["detail"] = detail
        super().__init__(
            message=f"Fatal error, can't open config file '{filename}'",
            code=ErrorCode.FILE_ERROR,
            data=data
        )


class ConfigLoadError(ConfigError):
    """
    설정 텍스트 적용 중 발생한 치명적 에러

    첫 번째 줄 단위 실패(cause)를 감싸고 1부터 시작하는 줄 번호와
    공백을 제거하지 않은 원본 줄을 함께 보관합니다.

    Attributes:
        cause (ConfigError): 원래 발생한 에러
        line_number (int): 1부터 시작하는 줄 번호
        raw_line (str): 원본 줄 내용
    """

    def __init__(self, cause: ConfigError, line_number: int, raw_line: str):
        self.cause = cause
        self.line_number = line_number
        self.raw_line = raw_line
        data = dict(cause.data)
        data["line"] = line_number
        super().__init__(message=cause.message, code=cause.code, data=data)

    def render(self) -> str:
        """표준 에러 스트림에 출력할 여러 줄 진단 메시지 생성"""
        return (
            "\n*** FATAL CONFIG FILE ERROR ***\n"
            f"Reading the configuration file, at line {self.line_number}\n"
            f">>> '{self.raw_line}'\n"
            f"Reason: {self.reason}\n"
        )


def render_diagnostic(error: ConfigError) -> str:
    """
    임의의 설정 에러를 진단 메시지로 변환

    줄 정보가 있는 ConfigLoadError는 전체 형식으로, 그 외 에러(구조 검증,
    파일 에러)는 배너와 사유만 포함한 형식으로 출력합니다.
    """
    if isinstance(error, ConfigLoadError):
        return error.render()
    return (
        "\n*** FATAL CONFIG FILE ERROR ***\n"
        f"{error.message}\n"
        f"Reason: {error.reason}\n"
    )
