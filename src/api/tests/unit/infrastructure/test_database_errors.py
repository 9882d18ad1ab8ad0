"""Unit tests for database error classification."""

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    ProgrammingError,
)

from infrastructure.database import is_unavailable_error, unique_violation_column

CONSTRAINTS = (("uq_members_email", "email"), ("members.email", "email"))


class TestIsUnavailableError:
    def test_operational_error(self):
        assert is_unavailable_error(OperationalError("SELECT 1", {}, Exception("x")))

    def test_socket_errors(self):
        assert is_unavailable_error(ConnectionRefusedError())
        assert is_unavailable_error(TimeoutError())

    def test_invalidated_connection(self):
        error = DBAPIError("SELECT 1", {}, Exception("x"), connection_invalidated=True)
        assert is_unavailable_error(error)

    def test_statement_errors_are_not_unavailability(self):
        assert not is_unavailable_error(ProgrammingError("SELECT", {}, Exception("x")))


class TestUniqueViolationColumn:
    def test_postgres_constraint_name(self):
        error = IntegrityError(
            "INSERT",
            {},
            Exception(
                'duplicate key value violates unique constraint "uq_members_email"'
            ),
        )
        assert unique_violation_column(error, CONSTRAINTS) == "email"

    def test_sqlite_column_text(self):
        error = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: members.email")
        )
        assert unique_violation_column(error, CONSTRAINTS) == "email"

    def test_other_integrity_errors(self):
        error = IntegrityError(
            "INSERT", {}, Exception('null value in column "name" violates not-null')
        )
        assert unique_violation_column(error, CONSTRAINTS) is None
