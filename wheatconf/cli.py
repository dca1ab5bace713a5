"""
wheatconf 명령행 인터페이스

설정 파일과 명령행 오버라이드를 로딩하고 결과를 확인합니다.

사용 예시:
    # 설정 확인 (전체 설정을 NOTICE 수준으로 출력)
    python -m wheatconf check wheatserver.conf --test

    # 오버라이드 적용 (나중 줄이 이김)
    python -m wheatconf check wheatserver.conf --set "port 9000" --set "daemon on"

    # 설정 하나 조회
    python -m wheatconf show worker-number wheatserver.conf

    # 다시 로딩 가능한 설정 텍스트 출력
    python -m wheatconf dump wheatserver.conf

설정 에러는 진단 메시지를 표준 에러로 출력하고 상태 코드 1로 종료합니다.
"""

from pathlib import Path
from typing import List, Optional

import typer

from wheatconf.exceptions import ConfigError
from wheatconf.config import (
    ConfigRegistry,
    ServerSettings,
    default_registry,
    dump_config,
    fatal_config_error,
    load_config_file,
)
from wheatconf.control import ConfigQuery, describe
from wheatconf.observability import configure_logging

app = typer.Typer(
    name="wheatconf",
    help="Load, validate and inspect server configuration",
    no_args_is_help=True,
)

ConfigArgument = typer.Argument(None, help="Configuration file path")
OverrideOption = typer.Option(
    None, "--set", "-s", help='Override line such as "port 9000" (repeatable)'
)


def _load(
    config_file: Optional[Path], overrides: Optional[List[str]], test: bool = False
) -> tuple[ConfigRegistry, ServerSettings]:
    configure_logging()
    registry = default_registry()
    options = "\n".join(overrides) if overrides else None
    try:
        settings = load_config_file(
            str(config_file) if config_file else "",
            options,
            registry,
            test=test,
            on_loaded=configure_logging,
        )
    except ConfigError as error:
        fatal_config_error(error)
    return registry, settings


@app.command("check")
def check(
    config_file: Optional[Path] = ConfigArgument,
    overrides: Optional[List[str]] = OverrideOption,
    test: bool = typer.Option(
        False, "--test", "-t", help="Print the loaded configuration at notice level"
    ),
) -> None:
    """Load the configuration and exit non-zero on the first error."""
    _load(config_file, overrides, test=test)
    typer.echo("Configuration is OK")


@app.command("show")
def show(
    name: str = typer.Argument(..., help="Setting name or unique prefix"),
    config_file: Optional[Path] = ConfigArgument,
    overrides: Optional[List[str]] = OverrideOption,
) -> None:
    """Describe one setting as "name: value"."""
    registry, _ = _load(config_file, overrides)
    typer.echo(describe(registry, ConfigQuery(name=name)))


@app.command("dump")
def dump(
    config_file: Optional[Path] = ConfigArgument,
    overrides: Optional[List[str]] = OverrideOption,
) -> None:
    """Print the loaded configuration as reloadable text."""
    registry, _ = _load(config_file, overrides)
    typer.echo(dump_config(registry), nl=False)


def main() -> None:
    app()
