"""
Pytest configuration and shared fixtures.

SQLcl 출력 샘플 (SET SQLFORMAT CSV + SET FEEDBACK ON 기준):
  - 헤더는 항상 따옴표로 감싼 컬럼명
  - 문자열 값은 따옴표, 숫자/NULL 은 따옴표 없음
  - 데이터 뒤에 빈 줄 1개 + "N rows selected." 1줄
"""
import os
import subprocess

import pytest

import config as settings
from sqlcl_query.runner import SQLclRunner

TEST_CONNECTION = "scott/tiger@localhost:1521/ORCL"

TABLE_OUTPUT = '''"ID","NAME"
1,"x"
2,"y"

2 rows selected. 
'''

NO_ROWS_OUTPUT = "\nno rows selected\n\n"

PLSQL_OUTPUT = """hello from dbms_output


PL/SQL procedure successfully completed.
"""

ERROR_OUTPUT = """
Error starting at line : 1 in command -
SELECT * FROM NO_SUCH_TABLE
Error at Command Line : 1 Column : 15
Error report -
SQL Error: ORA-00942: table or view does not exist
"""

BANNER_OUTPUT = """Picked up JAVA_TOOL_OPTIONS: -Dfile.encoding=UTF-8
"COUNT(*)"
42

1 row selected.
"""


class FakeRun:
    """subprocess.run 대체 - 호출 인자와 login.sql 내용을 기록"""

    def __init__(self, stdout="", returncode=0, exc=None):
        self.stdout = stdout
        self.returncode = returncode
        self.exc = exc
        self.calls = []
        self.login_dirs = []
        self.login_files = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        login_dir = kwargs["env"]["SQLPATH"]
        self.login_dirs.append(login_dir)
        with open(os.path.join(login_dir, "login.sql"), encoding="utf-8") as f:
            self.login_files.append(f.read())
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args, self.returncode, stdout=self.stdout)


@pytest.fixture(autouse=True)
def connection_env(monkeypatch):
    """기본 연결 문자열을 환경 변수로 설정"""
    monkeypatch.setenv(settings.DB_CONNECTION_ENV, TEST_CONNECTION)
    return TEST_CONNECTION


@pytest.fixture
def make_runner():
    """FakeRun 을 주입한 SQLclRunner 생성"""
    def _make(stdout="", returncode=0, exc=None, **kwargs):
        fake = FakeRun(stdout=stdout, returncode=returncode, exc=exc)
        kwargs.setdefault("sqlcl_path", "sql")
        return SQLclRunner(run=fake, **kwargs), fake
    return _make


# Markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "mcp: marks tests related to MCP functionality")
