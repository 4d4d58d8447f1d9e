"""
SQL 실행 파이프라인

    입력 정규화 -> (what-if 이면 여기서 반환) -> SQLcl 실행 -> 출력 분류 -> 결과 변환
"""

import logging
from typing import Any, Iterable, Optional, Union

from .normalizer import normalize_query
from .parser import classify_output
from .runner import SQLclRunner
from .shaper import shape_result

logger = logging.getLogger("sqlcl-query")


def invoke_sql(
    query: Union[str, Iterable[str]],
    connection: Optional[str] = None,
    scalar: bool = False,
    what_if: bool = False,
    runner: Optional[SQLclRunner] = None,
) -> Any:
    """
    SQL/PL-SQL 실행

    Returns:
        None            - 출력 없음 또는 "no rows selected"
        list[dict]      - 테이블 결과 (scalar=False)
        str             - 첫 행 첫 컬럼 값 (scalar=True), what-if 시 정규화된 SQL
        list[str]       - 일반 메시지 (예: PL/SQL procedure successfully completed.)

    Raises:
        SQLclQueryError - SQLcl이 실행 오류를 보고한 경우
    """
    sql = normalize_query(query)

    if what_if:
        logger.info("What-if: SQLcl not invoked")
        return sql

    runner = runner or SQLclRunner()
    output = runner.execute(sql, connection)
    return shape_result(classify_output(output), scalar=scalar)
