"""SQLcl Query Runner - 예외 정의"""


class SQLclError(Exception):
    """패키지 공통 예외"""


class SQLclQueryError(SQLclError):
    """SQLcl이 SQL/PL-SQL 실행 오류를 보고한 경우 (원문 메시지 보존)"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SQLclConfigError(SQLclError):
    """연결 문자열을 찾을 수 없는 경우"""


class SQLclInvocationError(SQLclError):
    """SQLcl 실행 실패 (바이너리 없음, 타임아웃 등)"""


class SQLclParseError(SQLclError):
    """CSV 출력이 복구 불가능하게 깨진 경우 (따옴표가 EOF까지 닫히지 않음 등)"""
