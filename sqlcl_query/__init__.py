"""
SQLcl Query Runner

SQL/PL-SQL 을 Oracle SQLcl 로 실행하고 CSV 출력을 행(dict) 리스트 또는 스칼라 값으로 변환합니다.

사용법:
    CLI:        sqlcl-query "SELECT 1 AS ONE FROM DUAL" --scalar
    MCP stdio:  python -m sqlcl_query.server --stdio
    MCP SSE:    python -m sqlcl_query.server
"""

from .errors import (
    SQLclConfigError,
    SQLclError,
    SQLclInvocationError,
    SQLclParseError,
    SQLclQueryError,
)
from .normalizer import QueryBuffer, normalize_query
from .parser import (
    ClassifiedOutput,
    Empty,
    ErrorMessage,
    NoRows,
    PlainMessage,
    Table,
    classify_output,
)
from .pipeline import invoke_sql
from .runner import SQLclRunner, TemporaryLoginFile
from .shaper import shape_result

__all__ = [
    "ClassifiedOutput",
    "Empty",
    "ErrorMessage",
    "NoRows",
    "PlainMessage",
    "QueryBuffer",
    "SQLclConfigError",
    "SQLclError",
    "SQLclInvocationError",
    "SQLclParseError",
    "SQLclQueryError",
    "SQLclRunner",
    "Table",
    "TemporaryLoginFile",
    "classify_output",
    "invoke_sql",
    "normalize_query",
    "shape_result",
]
