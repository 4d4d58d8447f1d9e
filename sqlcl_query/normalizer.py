"""
SQL 입력 정규화

여러 조각(fragment)으로 들어온 SQL 텍스트를 하나로 합치고
빈 줄(공백만 있는 줄 포함)을 제거합니다.
"""

from typing import Iterable, List


def _normalize_fragment(fragment: str) -> str:
    """줄바꿈을 \\n 으로 통일하고 끝에 줄바꿈 추가"""
    return fragment.replace("\r\n", "\n").replace("\r", "\n") + "\n"


def strip_blank_lines(text: str) -> str:
    """빈 줄 제거 - 나머지 줄의 내용과 순서는 유지"""
    return "".join(line + "\n" for line in text.split("\n") if line.strip())


def normalize_query(fragments: Iterable[str]) -> str:
    """SQL 조각들을 하나의 쿼리 텍스트로 합침"""
    if isinstance(fragments, str):
        fragments = [fragments]
    return strip_blank_lines("".join(_normalize_fragment(f) for f in fragments))


class QueryBuffer:
    """스트리밍 입력용 누적 버퍼 (파이프라인 입력 한 줄씩 add)"""

    def __init__(self):
        self._parts: List[str] = []

    def add(self, fragment: str) -> "QueryBuffer":
        self._parts.append(_normalize_fragment(fragment))
        return self

    def extend(self, fragments: Iterable[str]) -> "QueryBuffer":
        for fragment in fragments:
            self.add(fragment)
        return self

    def build(self) -> str:
        return strip_blank_lines("".join(self._parts))

    def __len__(self) -> int:
        return len(self._parts)
