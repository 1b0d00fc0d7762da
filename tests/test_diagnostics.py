from types import SimpleNamespace

from sqlalchemy.exc import DBAPIError

from sqlgateway.core.sql.diagnostics import describe_engine_error


class FakePostgresError(Exception):
    """Stands in for the native driver exception (asyncpg style)"""

    def __init__(self, message, detail=None, position=None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.position = position


def wrap(native):
    # Same chain as SQLAlchemy's asyncpg adapter: DBAPIError.orig <- adapter error <- native error
    adapted = Exception(f"{type(native)}: {native}")
    adapted.__cause__ = native
    return DBAPIError("SELEC 1", None, adapted)


def test_message_position_and_detail_from_native_error():
    error = wrap(
        FakePostgresError(
            'syntax error at or near "SELEC"', detail="near the start", position="1"
        )
    )
    diagnostics = describe_engine_error(error)

    assert diagnostics.message == 'syntax error at or near "SELEC"'
    assert diagnostics.detail == "near the start"
    assert diagnostics.position == 1


def test_missing_fields_are_none():
    diagnostics = describe_engine_error(wrap(FakePostgresError("division by zero")))

    assert diagnostics.message == "division by zero"
    assert diagnostics.detail is None
    assert diagnostics.position is None


def test_psycopg_style_diag():
    native = Exception("raw text")
    native.diag = SimpleNamespace(
        message_primary='relation "nope" does not exist',
        message_detail=None,
        statement_position="15",
    )
    diagnostics = describe_engine_error(DBAPIError("SELECT * FROM nope", None, native))

    assert diagnostics.message == 'relation "nope" does not exist'
    assert diagnostics.position == 15


def test_plain_exception_uses_its_text():
    diagnostics = describe_engine_error(ConnectionRefusedError("Connection refused"))

    assert diagnostics.message == "Connection refused"
    assert diagnostics.position is None
