"""
Tests for the end-to-end SQL pipeline (normalize -> run -> classify -> shape).
"""
import pytest

from conftest import ERROR_OUTPUT, NO_ROWS_OUTPUT, PLSQL_OUTPUT, TABLE_OUTPUT
from sqlcl_query.errors import SQLclQueryError
from sqlcl_query.pipeline import invoke_sql


class TestInvokeSQL:

    def test_table(self, make_runner):
        runner, fake = make_runner(stdout=TABLE_OUTPUT)
        rows = invoke_sql("SELECT ID, NAME FROM T", runner=runner)
        assert rows == [{"ID": "1", "NAME": "x"}, {"ID": "2", "NAME": "y"}]
        assert fake.calls[0][1]["input"] == "SELECT ID, NAME FROM T\n"

    def test_scalar(self, make_runner):
        runner, _ = make_runner(stdout=TABLE_OUTPUT)
        assert invoke_sql("SELECT ID, NAME FROM T", scalar=True, runner=runner) == "1"

    def test_fragments_normalized_before_run(self, make_runner):
        runner, fake = make_runner(stdout=PLSQL_OUTPUT)
        invoke_sql(["BEGIN", "", "  dbms_output.put_line('hello');", "END;", "/"], runner=runner)
        assert fake.calls[0][1]["input"] == "BEGIN\n  dbms_output.put_line('hello');\nEND;\n/\n"

    def test_plain_message(self, make_runner):
        runner, _ = make_runner(stdout=PLSQL_OUTPUT)
        result = invoke_sql("BEGIN NULL; END;\n/", scalar=True, runner=runner)
        assert result == ["hello from dbms_output", "PL/SQL procedure successfully completed."]

    @pytest.mark.parametrize("stdout", ["", "\n \n", NO_ROWS_OUTPUT])
    def test_absent(self, make_runner, stdout):
        runner, _ = make_runner(stdout=stdout)
        assert invoke_sql("SELECT * FROM T WHERE 1 = 0", runner=runner) is None
        assert invoke_sql("SELECT * FROM T WHERE 1 = 0", scalar=True, runner=runner) is None

    def test_error(self, make_runner):
        runner, _ = make_runner(stdout=ERROR_OUTPUT)
        with pytest.raises(SQLclQueryError) as exc_info:
            invoke_sql("SELECT * FROM NO_SUCH_TABLE", runner=runner)
        assert "ORA-00942" in exc_info.value.message

    def test_what_if_skips_subprocess(self, make_runner):
        runner, fake = make_runner(stdout=TABLE_OUTPUT)
        result = invoke_sql(["SELECT 1", "  ", "FROM DUAL"], what_if=True, runner=runner)
        assert result == "SELECT 1\nFROM DUAL\n"
        assert fake.calls == []
        assert fake.login_dirs == []

    def test_explicit_connection(self, make_runner):
        runner, fake = make_runner(stdout=TABLE_OUTPUT)
        invoke_sql("SELECT 1 FROM DUAL", connection="hr/hr@db", runner=runner)
        assert fake.calls[0][0][-1] == "hr/hr@db"
