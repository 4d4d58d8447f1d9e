"""
SQLcl 출력 분류 및 CSV 파싱

SQLcl(SET SQLFORMAT CSV, SET FEEDBACK ON)의 텍스트 출력을 다음 중 하나로 분류합니다.

    Empty          : 출력 없음
    ErrorMessage   : "Error starting at ..." / "Error Message = ..." 가 포함된 출력
    NoRows         : 마지막 줄이 "no rows selected"
    PlainMessage   : 첫 줄이 따옴표로 시작하지 않는 일반 메시지
                     (예: "PL/SQL procedure successfully completed.")
    Table          : 따옴표로 시작하는 헤더 + 데이터 행

테이블 출력 예시:

    "ID","NAME"
    1,"x"
    2,"y"

    2 rows selected.

마지막 두 줄(빈 줄, "N rows selected.")은 데이터가 아니므로 버립니다.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from io import StringIO
from typing import Dict, List, Tuple

import pandas as pd

from .errors import SQLclParseError

logger = logging.getLogger("sqlcl-query.parser")

ERROR_PREFIXES = ("Error starting at ", "Error Message = ")
NO_ROWS_MARKER = "no rows selected"
QUOTE = '"'
HEADER_SEPARATOR = '","'
TRAILER_LINES = 2


# =============================================================================
# Classified Output
# =============================================================================
class ClassifiedOutput:
    """분류 결과 공통 베이스"""


@dataclass(frozen=True)
class Empty(ClassifiedOutput):
    pass


@dataclass(frozen=True)
class ErrorMessage(ClassifiedOutput):
    text: str


@dataclass(frozen=True)
class NoRows(ClassifiedOutput):
    pass


@dataclass(frozen=True)
class PlainMessage(ClassifiedOutput):
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class Table(ClassifiedOutput):
    header: Tuple[str, ...]
    rows: List[Dict[str, str]] = field(default_factory=list)
    suspect_lines: Tuple[str, ...] = ()


# =============================================================================
# Helpers
# =============================================================================
def split_output(text: str) -> List[str]:
    """앞뒤 빈 줄은 통째로 trim 하고 줄 단위로 분리"""
    text = text.strip()
    if not text:
        return []
    # splitlines() 는 \x0c, \u2028 등 값 안의 문자에서도 줄을 나눔
    return [line.rstrip("\r") for line in text.split("\n")]


def is_error_output(lines: List[str]) -> bool:
    """에러 시그니처 검사 - 첫 줄뿐 아니라 모든 줄을 검사 (배너가 앞에 붙을 수 있음)"""
    return any(line.startswith(ERROR_PREFIXES) for line in lines)


def find_unterminated_lines(lines: List[str]) -> List[str]:
    """따옴표 개수가 홀수인 줄 (제어 문자로 CSV 따옴표가 깨진 값)"""
    return [line for line in lines if line.count(QUOTE) % 2 == 1]


def disambiguate_header(names: List[str]) -> List[str]:
    """중복 컬럼명에 등장 횟수(2, 3, ...)를 붙여 고유하게 만듦

    ["A", "A", "A"] -> ["A", "A2", "A3"]
    """
    counts: Counter = Counter()
    result: List[str] = []
    for name in names:
        counts[name] += 1
        candidate = name if counts[name] == 1 else f"{name}{counts[name]}"
        # "A","A","A2" 처럼 접미사가 기존 이름과 겹치는 경우
        while candidate in result:
            counts[name] += 1
            candidate = f"{name}{counts[name]}"
        result.append(candidate)
    return result


def parse_header(line: str) -> List[str]:
    """헤더 줄을 '","' 기준으로 분리하고 남은 따옴표 제거"""
    return disambiguate_header([token.strip(QUOTE) for token in line.split(HEADER_SEPARATOR)])


def close_open_quotes(lines: List[str]) -> List[str]:
    """홀수 따옴표 줄의 열린 따옴표를 줄 끝에서 닫음 (깨진 줄이 다음 행을 삼키지 않게)"""
    return [line + QUOTE if line.count(QUOTE) % 2 == 1 else line for line in lines]


def fit_row(header: List[str]):
    """헤더보다 필드가 많은 행은 헤더 길이로 자르고 경고"""
    def _fit(fields: List[str]) -> List[str]:
        logger.warning(
            f"Row has {len(fields)} fields but header has {len(header)}; "
            f"extra fields dropped: {fields[len(header):]}"
        )
        return fields[:len(header)]
    return _fit


def parse_rows(header: List[str], data_lines: List[str]) -> List[Dict[str, str]]:
    """데이터 줄을 CSV 레코드로 파싱 (모든 값은 문자열)"""
    rows: List[Dict[str, str]] = []

    if any(line.strip() for line in data_lines):
        if "\n".join(data_lines).count(QUOTE) % 2 == 1:
            # 끝까지 닫히지 않는 따옴표 - 줄 단위 레코드로 복구
            data_lines = close_open_quotes(data_lines)

        # 헤더 줄을 첫 행으로 넣어 첫 데이터 행이 길어도 인덱스 컬럼으로 해석되지 않게 함
        data = "\n".join([QUOTE + HEADER_SEPARATOR.join(header) + QUOTE] + data_lines)
        try:
            df = pd.read_csv(
                StringIO(data),
                engine="python",
                header=None,
                names=header,
                dtype=str,
                keep_default_na=False,
                quotechar=QUOTE,
                skip_blank_lines=True,
                on_bad_lines=fit_row(header),
            )
        except pd.errors.ParserError as e:
            raise SQLclParseError(f"CSV parsing error: {e}") from e
        rows = df.iloc[1:].fillna("").to_dict(orient="records")

    if not rows:
        # 헤더 구조를 유지하기 위해 빈 값으로 채운 1행 반환
        rows = [{name: "" for name in header}]
    return rows


# =============================================================================
# Classifier
# =============================================================================
def classify_lines(lines: List[str]) -> ClassifiedOutput:
    """이미 trim/분리된 출력 줄을 분류 (위에서부터 처음 일치하는 규칙 적용)"""
    if not lines or not any(line.strip() for line in lines):
        return Empty()

    if is_error_output(lines):
        return ErrorMessage("\n".join(lines))

    if lines[-1] == NO_ROWS_MARKER:
        return NoRows()

    if not lines[0].startswith(QUOTE):
        return PlainMessage(tuple(line for line in lines if line.strip()))

    # 마지막 두 줄 (빈 줄 + "N rows selected.") 제거
    body = lines[:-TRAILER_LINES] or lines[:1]
    header_line, data_lines = body[0], body[1:]

    suspect = find_unterminated_lines(data_lines)
    if suspect:
        logger.warning(
            "Rows with unterminated quoted fields (a value likely contains a raw control "
            "character; strip control characters from the source column):\n%s",
            "\n".join(suspect),
        )

    header = parse_header(header_line)
    rows = parse_rows(header, data_lines)
    logger.debug(f"Parsed table: {len(header)} columns, {len(rows)} rows")
    return Table(tuple(header), rows, tuple(suspect))


def classify_output(text: str) -> ClassifiedOutput:
    """SQLcl 원본 출력 텍스트를 분류"""
    return classify_lines(split_output(text))
