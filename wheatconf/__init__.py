"""
wheatconf

서버 프로세스용 타입 지정 설정 레지스트리와 설정 텍스트 로더입니다.
"""

__version__ = "0.1.0"
