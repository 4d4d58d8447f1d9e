"""분류된 SQLcl 출력을 호출자가 원하는 형태(테이블/스칼라)로 변환"""

import logging
from typing import Any, Optional

from .errors import SQLclQueryError
from .parser import ClassifiedOutput, Empty, ErrorMessage, NoRows, PlainMessage, Table

logger = logging.getLogger("sqlcl-query.shaper")


def first_value(table: Table) -> Optional[str]:
    """첫 번째 행의 첫 번째 컬럼 값"""
    if not table.rows or not table.header:
        return None
    return table.rows[0].get(table.header[0])


def shape_result(classified: ClassifiedOutput, scalar: bool = False) -> Any:
    """
    Empty / NoRows  -> None
    ErrorMessage    -> SQLclQueryError
    PlainMessage    -> 메시지 줄 리스트 (scalar 무시)
    Table           -> 행 리스트, scalar=True 이면 첫 값
    """
    if isinstance(classified, (Empty, NoRows)):
        return None

    if isinstance(classified, ErrorMessage):
        logger.error(classified.text)
        raise SQLclQueryError(classified.text)

    if isinstance(classified, PlainMessage):
        return list(classified.lines)

    if isinstance(classified, Table):
        if scalar:
            return first_value(classified)
        return classified.rows

    raise TypeError(f"Unknown output classification: {type(classified).__name__}")
