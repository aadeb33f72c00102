import logging

import pytest

from app.utils.exceptions import (
    AuthenticationError,
    DatabaseError,
    ExceptionContext,
    UnsupportedDocumentError,
    ValidationError,
    map_to_http_exception,
)


class TestExceptionMapping:

    @pytest.mark.parametrize("exc,status_code", [
        (ValidationError("bad", field="file"), 400),
        (UnsupportedDocumentError(), 415),
        (AuthenticationError(), 401),
        (DatabaseError("down", operation="find"), 500),
    ])
    def test_status_codes(self, exc, status_code):
        assert map_to_http_exception(exc).status_code == status_code

    def test_to_dict_includes_cause(self):
        exc = DatabaseError("down", operation="aggregate", collection="candidates", cause=RuntimeError("timeout"))

        assert exc.to_dict() == {
            "error_type": "DatabaseError",
            "error_code": "DATABASE_ERROR",
            "message": "down",
            "details": {"operation": "aggregate", "collection": "candidates"},
            "cause": "timeout",
        }


class TestExceptionContext:

    def test_wraps_storage_failures(self):
        logger = logging.getLogger("test")

        with pytest.raises(DatabaseError) as exc_info:
            with ExceptionContext("check for duplicates", logger, collection="candidates", request_id="r1"):
                raise RuntimeError("connection refused")

        assert exc_info.value.details == {
            "operation": "check for duplicates",
            "collection": "candidates",
            "request_id": "r1",
        }
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_custom_exceptions_pass_through(self):
        with pytest.raises(ValidationError):
            with ExceptionContext("upload"):
                raise ValidationError("No file provided")
