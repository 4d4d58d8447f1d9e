"""
SQLcl 실행기 (subprocess)

정규화된 SQL을 `sql -S <connection>` 의 stdin 으로 전달하고
stdout/stderr 를 합쳐 텍스트로 수집합니다.

출력 포맷은 login.sql 프리앰블(SET SQLFORMAT CSV 등)로 고정합니다.
login.sql 은 호출마다 고유한 임시 디렉토리에 생성되고, 자식 프로세스의
SQLPATH 만 그 디렉토리로 바꿉니다. 부모 프로세스의 환경 변수는 건드리지 않습니다.
"""

import logging
import os
import re
import subprocess
import tempfile
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import config
from config import (
    JAVA_TOOL_OPTIONS,
    NLS_LANG,
    SQLCL_LOGIN_COMMANDS,
    SQLCL_PATH,
    SQLCL_TIMEOUT,
)

from .errors import SQLclConfigError, SQLclInvocationError

logger = logging.getLogger("sqlcl-query.runner")

LOGIN_FILE_NAME = "login.sql"

# SQLcl(JVM)이 출력하는 배너 - 결과 데이터가 아님
BANNER_PREFIXES = ("Picked up JAVA_TOOL_OPTIONS", "Picked up _JAVA_OPTIONS")
ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;]*[a-zA-Z]')


# =============================================================================
# Login File Provider
# =============================================================================
class TemporaryLoginFile:
    """호출마다 고유한 임시 디렉토리에 login.sql 생성, 종료 시 삭제"""

    def __init__(self, prefix: str = "sqlcl-login-"):
        self.prefix = prefix

    @contextmanager
    def open(self, commands: str) -> Iterator[str]:
        with tempfile.TemporaryDirectory(prefix=self.prefix) as directory:
            path = os.path.join(directory, LOGIN_FILE_NAME)
            with open(path, "w", encoding="utf-8") as f:
                f.write(commands)
            logger.debug(f"Login file written: {path}")
            yield directory


# =============================================================================
# Connection
# =============================================================================
def resolve_connection(connection: Optional[str] = None) -> str:
    """명시된 연결 문자열 -> 환경 변수 -> config 개별 설정 순으로 결정"""
    if connection:
        return connection

    from_env = os.getenv(config.DB_CONNECTION_ENV, "")
    if from_env:
        return from_env

    if config.DB_CONNECTION:
        return config.DB_CONNECTION

    raise SQLclConfigError(
        f"No connection string: pass one explicitly or set {config.DB_CONNECTION_ENV}"
    )


def mask_connection(connection: str) -> str:
    """로그용 - 비밀번호 가리기 (user/***@host)"""
    return re.sub(r"/[^@]+@", "/***@", connection)


def clean_output(output: str) -> str:
    """JVM 배너 줄과 ANSI escape 코드 제거"""
    lines = [
        ANSI_ESCAPE.sub('', line)
        for line in output.split('\n')
        if not line.startswith(BANNER_PREFIXES)
    ]
    return '\n'.join(lines)


# =============================================================================
# Runner
# =============================================================================
class SQLclRunner:
    """SQLcl 1회 실행 = subprocess 1개"""

    def __init__(
        self,
        sqlcl_path: str = SQLCL_PATH,
        login_provider=None,
        login_commands: str = SQLCL_LOGIN_COMMANDS,
        timeout: Optional[float] = SQLCL_TIMEOUT,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.sqlcl_path = sqlcl_path
        self.login_provider = login_provider or TemporaryLoginFile()
        self.login_commands = login_commands
        self.timeout = timeout or None
        self._run = run

    def build_env(self, login_dir: str) -> dict:
        """자식 프로세스용 환경 변수 (부모 환경 복사본)"""
        env = os.environ.copy()
        env["SQLPATH"] = login_dir
        env["NLS_LANG"] = NLS_LANG
        env["JAVA_TOOL_OPTIONS"] = JAVA_TOOL_OPTIONS
        return env

    def execute(self, query: str, connection: Optional[str] = None) -> str:
        """SQL 실행 후 정리된 출력 텍스트 반환"""
        connection = resolve_connection(connection)
        logger.debug(f"Executing on {mask_connection(connection)}: {query[:100]}")

        with self.login_provider.open(self.login_commands) as login_dir:
            try:
                result = self._run(
                    [self.sqlcl_path, "-S", connection],
                    input=query,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    encoding='utf-8',
                    errors='replace',
                    env=self.build_env(login_dir),
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise SQLclInvocationError(f"Query timeout ({self.timeout}s)") from e
            except OSError as e:
                raise SQLclInvocationError(f"Failed to start SQLcl ({self.sqlcl_path}): {e}") from e

        logger.info(f"SQLcl exited with code {result.returncode}")
        output = clean_output(result.stdout or "")
        logger.debug(f"Output: {output[:200] if output else 'None'}")
        return output
