"""
런타임 설정 조회 명령

연결된 관리 클라이언트가 설정 이름 하나를 보내면 "name: value" 한 줄로 응답합니다.
이름을 찾을 수 없으면 고정된 "No Correspond Configuration" 메시지로 응답합니다.

이 명령은 이미 반영된 값만 읽으므로 별도 동기화가 필요 없습니다.
설정 재로딩과 동시에 실행되는 경우는 지원하지 않습니다.
"""

from typing import Protocol, Sequence

from pydantic import BaseModel, Field
import structlog

from wheatconf.config.formatter import CONFIG_LINE_MAX, format_entry
from wheatconf.config.registry import ConfigRegistry

logger = structlog.get_logger(__name__)

NO_SUCH_CONFIGURATION = "No Correspond Configuration"


class ConfigQuery(BaseModel):
    """설정 조회 요청 모델"""

    name: str = Field(..., description="조회할 설정 이름 (접두사 허용)")

    @classmethod
    def from_argv(cls, argv: Sequence[str]) -> "ConfigQuery":
        """["config", "<name>"] 형태의 명령 인자에서 요청 생성"""
        return cls(name=argv[1] if len(argv) > 1 else "")


class ReplyChannel(Protocol):
    """관리 클라이언트 응답 채널"""

    def reply(self, data: str) -> None: ...


def describe(registry: ConfigRegistry, query: ConfigQuery) -> str:
    """조회 요청에 대한 응답 문자열 생성"""
    entry = registry.lookup(query.name)
    if entry is None:
        logger.info("설정 조회 실패", name=query.name)
        return NO_SUCH_CONFIGURATION
    return format_entry(entry, CONFIG_LINE_MAX)


def config_command(
    registry: ConfigRegistry, argv: Sequence[str], channel: ReplyChannel
) -> None:
    """관리 클라이언트의 config 명령 처리"""
    query = ConfigQuery.from_argv(argv)
    channel.reply(describe(registry, query))
