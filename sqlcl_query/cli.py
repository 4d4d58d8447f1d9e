"""
SQLcl Query Runner - CLI

사용법:
    sqlcl-query "SELECT * FROM DEPT"
    sqlcl-query --scalar "SELECT COUNT(*) FROM EMP"
    sqlcl-query -f report.sql --format csv
    cat proc.sql | sqlcl-query --what-if

종료 코드:
    0  성공 (결과 없음 포함)
    1  SQLcl이 실행 오류를 보고
    2  설정/실행 오류 (연결 문자열 없음, SQLcl 실행 실패 등)
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

import pandas as pd

from config import APP_VERSION, LOG_FORMAT, LOG_LEVEL, SQLCL_PATH, SQLCL_TIMEOUT

from .errors import SQLclError, SQLclQueryError
from .normalizer import QueryBuffer
from .pipeline import invoke_sql
from .runner import SQLclRunner

logger = logging.getLogger("sqlcl-query.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlcl-query",
        description="Run SQL/PL-SQL through Oracle SQLcl and parse its CSV output.",
    )
    parser.add_argument("query", nargs="*", help="SQL text (each argument is one fragment).")
    parser.add_argument("-f", "--file", help="Read SQL from a file.")
    parser.add_argument("-c", "--connection", help="Connection string [user/password@host:port/service].")
    parser.add_argument("-s", "--scalar", action="store_true", help="Return only the first value of the first row.")
    parser.add_argument("-n", "--what-if", action="store_true", help="Print the normalized SQL without running it.")
    parser.add_argument("--format", choices=["json", "csv"], default="json", help="Output format for table results.")
    parser.add_argument("--timeout", type=float, default=SQLCL_TIMEOUT, help="SQLcl timeout in seconds (0 = none).")
    parser.add_argument("--sqlcl-path", default=SQLCL_PATH, help="Path to the SQLcl executable.")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser


def read_query(args: argparse.Namespace, stdin=None) -> List[str]:
    """인자 -> 파일 -> 파이프 stdin 순으로 SQL 조각 수집"""
    if args.query:
        return list(args.query)

    if args.file:
        with open(args.file, encoding="utf-8") as f:
            return [f.read()]

    stdin = stdin or sys.stdin
    if stdin.isatty():
        return []

    buffer = QueryBuffer()
    for line in stdin:
        buffer.add(line.rstrip("\n"))
    sql = buffer.build()
    return [sql] if sql else []


def render(value: Any, output_format: str = "json") -> Optional[str]:
    """결과값을 출력용 문자열로 변환"""
    if value is None:
        return None

    if isinstance(value, str):
        return value

    if value and isinstance(value[0], dict):
        if output_format == "csv":
            return pd.DataFrame(value).to_csv(index=False).rstrip("\n")
        return json.dumps(value, ensure_ascii=False, indent=2)

    return "\n".join(value)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        fragments = read_query(args)
    except OSError as e:
        parser.error(f"cannot read SQL file: {e}")
    if not fragments:
        parser.error("no SQL given (argument, --file or piped stdin)")

    runner = SQLclRunner(sqlcl_path=args.sqlcl_path, timeout=args.timeout)
    try:
        value = invoke_sql(
            fragments,
            connection=args.connection,
            scalar=args.scalar,
            what_if=args.what_if,
            runner=runner,
        )
    except SQLclQueryError as e:
        print(e.message, file=sys.stderr)
        return 1
    except SQLclError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.what_if:
        sys.stdout.write(value)
        return 0

    text = render(value, args.format)
    if text is not None:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
