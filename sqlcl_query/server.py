"""
SQLcl Query MCP Server - SSE/stdio 방식

SQL 요청마다 SQLcl 을 1회 실행하고 CSV 출력을 JSON 으로 변환하여 반환
MCP 프로토콜을 통해 Claude Desktop, VS Code 등과 연동

사용법:
    SSE 모드 (기본): python -m sqlcl_query.server
    stdio 모드:      python -m sqlcl_query.server --stdio
"""

import asyncio
import json
import logging
import os
import sys
from functools import partial
from typing import Optional

# MCP imports
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.sse import SseServerTransport
from mcp.types import Tool, TextContent

# SSE/HTTP imports
from starlette.applications import Starlette
from starlette.routing import Mount, Route
from starlette.responses import JSONResponse, PlainTextResponse
import uvicorn

import config
from config import APP_VERSION, LOG_FORMAT, LOG_LEVEL, SERVER_HOST, SERVER_PORT

from .errors import SQLclError
from .pipeline import invoke_sql
from .runner import SQLclRunner

logger = logging.getLogger("sqlcl-query-server")


# =============================================================================
# Tools
# =============================================================================
server = Server("sqlcl-query")
runner: Optional[SQLclRunner] = None


def get_runner() -> SQLclRunner:
    global runner
    if runner is None:
        runner = SQLclRunner()
    return runner


def connection_configured() -> bool:
    return bool(os.getenv(config.DB_CONNECTION_ENV) or config.DB_CONNECTION)


def get_status() -> dict:
    return {
        "sqlcl_path": get_runner().sqlcl_path,
        "connection_configured": connection_configured(),
        "version": APP_VERSION,
    }


@server.list_tools()
async def list_tools():
    """사용 가능한 도구 목록"""
    return [
        Tool(
            name="execute_sql",
            description="Execute an Oracle SQL or PL/SQL block through SQLcl and return the parsed result as JSON",
            inputSchema={
                "type": "object",
                "properties": {
                    "sql": {
                        "type": "string",
                        "description": "The SQL query or PL/SQL block to execute"
                    },
                    "scalar": {
                        "type": "boolean",
                        "description": "Return only the first value of the first row"
                    },
                    "what_if": {
                        "type": "boolean",
                        "description": "Return the normalized SQL without executing it"
                    }
                },
                "required": ["sql"]
            }
        ),
        Tool(
            name="get_status",
            description="Get SQLcl runner status",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        )
    ]


async def dispatch_tool(name: str, arguments: dict) -> str:
    """도구 실행 - 결과 텍스트 반환"""
    if name == "execute_sql":
        sql = arguments.get("sql", "")
        if not sql:
            return "ERROR: SQL query is required"

        call = partial(
            invoke_sql,
            sql,
            scalar=bool(arguments.get("scalar", False)),
            what_if=bool(arguments.get("what_if", False)),
            runner=get_runner(),
        )
        try:
            value = await asyncio.get_running_loop().run_in_executor(None, call)
        except SQLclError as e:
            return f"ERROR: {e}"
        return json.dumps(value, ensure_ascii=False)

    if name == "get_status":
        return json.dumps(get_status(), ensure_ascii=False)

    return f"ERROR: Unknown tool: {name}"


@server.call_tool()
async def call_tool(name: str, arguments: dict):
    """도구 실행"""
    try:
        text = await dispatch_tool(name, arguments or {})
    except Exception as e:
        logger.exception(f"Tool error: {e}")
        text = f"ERROR: {e}"
    return [TextContent(type="text", text=text)]


# =============================================================================
# SSE Server (HTTP 방식 - 상주 서버)
# =============================================================================
sse_transport = SseServerTransport("/messages")


async def handle_status(request):
    """상태 확인"""
    return JSONResponse({"status": "running", "mode": "per-request", **get_status()})


class SSEApp:
    """GET /sse, POST /messages 를 MCP SSE transport 로 연결"""

    async def __call__(self, scope, receive, send):
        route = (scope.get("method", "GET"), scope.get("path", ""))

        if route == ("GET", "/sse"):
            await self.connect(scope, receive, send)
        elif route == ("POST", "/messages"):
            await sse_transport.handle_post_message(scope, receive, send)
        else:
            await PlainTextResponse("Not Found", status_code=404)(scope, receive, send)

    async def connect(self, scope, receive, send):
        async with sse_transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def create_sse_app():
    """SSE 앱 생성"""
    return Starlette(
        routes=[
            Route("/status", endpoint=handle_status),
            Mount("/", app=SSEApp()),
        ],
    )


async def main_stdio():
    """stdio 모드 (Claude Desktop 연동용)"""
    logger.info("Starting MCP stdio server...")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main_sse():
    """SSE 모드 (HTTP 상주 서버)"""
    logger.info(f"Starting MCP SSE server on http://{SERVER_HOST}:{SERVER_PORT}")
    uvicorn.run(create_sse_app(), host=SERVER_HOST, port=SERVER_PORT, log_level="info")


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    logger.info(f"SQLcl Path: {get_runner().sqlcl_path}")
    logger.info(f"DB Connection: {'Set' if connection_configured() else 'NOT SET!'}")

    if "--stdio" in sys.argv:
        try:
            asyncio.run(main_stdio())
        except KeyboardInterrupt:
            logger.info("Server interrupted")
    else:
        main_sse()


if __name__ == "__main__":
    main()
