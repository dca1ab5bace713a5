"""
관찰 가능성 패키지

설정 컨텍스트를 받아 프로세스 로깅을 구성합니다.
"""

from .logging import configure_logging, log_level_for

__all__ = ["configure_logging", "log_level_for"]
