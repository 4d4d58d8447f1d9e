"""
SQLcl Query Runner - Configuration

모든 설정값을 한 곳에서 관리합니다.
환경 변수(.env 포함)로 오버라이드 가능합니다.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv(override=True)


# =============================================================================
# SQLcl Client
# =============================================================================
SQLCL_PATH = os.getenv("SQLCL_PATH", "sql")

# 0 이면 타임아웃 없음
SQLCL_TIMEOUT = int(os.getenv("SQLCL_TIMEOUT", "0"))

# SQLcl 출력 인코딩 (한글 깨짐 방지)
NLS_LANG = os.getenv("NLS_LANG", "AMERICAN_AMERICA.AL32UTF8")
JAVA_TOOL_OPTIONS = os.getenv("JAVA_TOOL_OPTIONS", "-Dfile.encoding=UTF-8 -Dstdout.encoding=UTF-8")

# login.sql 에 기록되는 프리앰블 - CSV 포맷, feedback, serveroutput
SQLCL_LOGIN_COMMANDS = """SET SQLFORMAT CSV
SET FEEDBACK ON
SET SERVEROUTPUT ON
SET PAGESIZE 50000
SET LINESIZE 32767
SET LONG 50000
SET VERIFY OFF
SET ECHO OFF
"""


# =============================================================================
# Database Connection
# =============================================================================
# 연결 문자열을 읽어올 환경 변수 이름
DB_CONNECTION_ENV = os.getenv("DB_CONNECTION_ENV", "DB_CONNECTION")

# 방법 1: 전체 연결 문자열 (우선 사용)
# 형식: user/password@host:port/service 또는 user/password@tnsname
DB_CONNECTION = os.getenv(DB_CONNECTION_ENV, "")

# 방법 2: 개별 설정 (DB_CONNECTION이 비어있을 때 사용)
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "1521")
DB_SERVICE = os.getenv("DB_SERVICE", "ORCL")
DB_USER = os.getenv("DB_USER", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")

if not DB_CONNECTION and DB_USER and DB_PASSWORD:
    DB_CONNECTION = f"{DB_USER}/{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_SERVICE}"


# =============================================================================
# MCP Server Configuration
# =============================================================================
SERVER_HOST = os.getenv("MCP_SERVER_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("MCP_SERVER_PORT", "8765"))


# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# =============================================================================
# App Version
# =============================================================================
APP_VERSION = "1.0.0"
