"""
설정 텍스트 라인 파서

설정 텍스트를 논리적인 줄과 토큰으로 분리합니다.

규칙:
    - 줄 양끝의 탭/개행/캐리지 리턴/공백을 제거합니다.
    - 빈 줄, '#' 또는 공백으로 시작하는 줄은 건너뜁니다.
    - 토큰은 첫 번째 공백에서 한 번만 나눕니다: (설정 이름, 나머지 값)
    - 리스트 블록: 설정 이름만 있는 줄 다음에 오는 "- 항목" 줄들

리스트 블록 예시:
    mylist
    - alpha
    - beta
    other-setting value

블록은 항목 형식이 아닌 첫 줄에서 끝나며, 그 줄은 일반 줄로 다시 처리됩니다.
"""

from typing import Optional

LINE_SEPARATOR = "\n"
STRIP_CHARS = "\t\n\r "
COMMENT_PREFIX = "#"
LIST_MARKER = "-"


def split_lines(text: str) -> list[str]:
    return text.split(LINE_SEPARATOR)


def strip_line(line: str) -> str:
    return line.strip(STRIP_CHARS)


def is_skippable(stripped: str) -> bool:
    """주석 또는 빈 줄 여부"""
    return not stripped or stripped[0] in (COMMENT_PREFIX, " ")


def tokenize(stripped: str) -> list[str]:
    """첫 번째 공백에서만 나눠 [이름] 또는 [이름, 나머지] 반환"""
    return stripped.split(" ", 1)


def repair_tokens(tokens: list[str], arity: int) -> list[str]:
    """
    인자 개수 보정

    토큰 수가 선언된 개수와 다르고 토큰이 두 개 이상이면, 두 번째 이후 토큰을
    구분자 없이 이어 붙여 하나의 값 토큰으로 만듭니다. 보정 후에도 개수가
    맞지 않는지는 호출자가 판단합니다.
    """
    if len(tokens) == arity or len(tokens) < 2:
        return tokens
    return [tokens[0], "".join(tokens[1:])]


def scan_list_item(stripped: str) -> Optional[str]:
    """
    리스트 항목 줄 해석

    Returns:
        항목 문자열, 항목 없이 소비되는 줄(빈 줄, 단독 '-')이면 빈 문자열,
        형식이 잘못된 줄이면 None
    """
    marked = False
    for position, char in enumerate(stripped):
        if char == " ":
            continue
        if char == LIST_MARKER:
            # 내용 전에 나온 두 번째 '-'는 잘못된 형식
            if marked:
                return None
            marked = True
            continue
        if not marked:
            return None
        return stripped[position:]
    return ""


def parse_list_block(lines: list[str], start: int) -> tuple[list[str], int]:
    """
    리스트 블록 수집

    Args:
        lines: 전체 설정 줄 목록
        start: 설정 이름만 있는 줄의 인덱스

    Returns:
        (항목 리스트, 마지막으로 소비한 줄의 인덱스). 블록을 끝낸 줄은
        소비하지 않으므로 호출자는 반환된 인덱스 다음 줄부터 처리를 이어갑니다.
    """
    items: list[str] = []
    position = start + 1
    while position < len(lines):
        item = scan_list_item(strip_line(lines[position]))
        if item is None:
            break
        if item:
            items.append(item)
        position += 1
    return items, position - 1
