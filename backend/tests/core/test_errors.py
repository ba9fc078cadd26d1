"""Error Hierarchy — codes, statuses, severities and the response envelope.

Invariants:
    - Caller mistakes (validation, not found) are INFO severity
    - Delete conflict is 409 and carries device_count
    - Internal and database errors never expose driver details in the message
"""

from fleetconfig.core.errors import (
    DatabaseError, ErrorCategory, ErrorContext, ErrorSeverity, InternalError,
    ResourceNotFoundError, TemplateAssignedError, TemplateValidationError,
)


def test_validation_error():
    error = TemplateValidationError("invalid scope", field="scope")
    assert (error.http_status, error.code, error.severity) == (
        400, "VALIDATION_ERROR", ErrorSeverity.INFO,
    )
    assert error.category is ErrorCategory.VALIDATION


def test_not_found_message_and_context():
    error = ResourceNotFoundError("Template", 99, ErrorContext(template_id=99))
    response = error.to_response()["error"]

    assert error.http_status == 404
    assert response["message"] == "Template '99' not found"
    assert response["severity"] == "info"
    assert response["context"] == {"template_id": 99, "device_id": None}
    assert "details" not in response


def test_template_assigned_carries_device_count():
    error = TemplateAssignedError(7, 2)
    response = error.to_response()["error"]

    assert error.http_status == 409
    assert response["code"] == "TEMPLATE_ASSIGNED"
    assert response["details"] == {"device_count": 2}
    assert response["context"]["template_id"] == 7


def test_internal_error_is_generic():
    error = InternalError("serialize_config")
    assert error.http_status == 500
    assert error.message == "An unexpected error occurred"
    assert error.context.operation == "serialize_config"


def test_database_error():
    error = DatabaseError("insert", ErrorContext(operation="insert"))
    assert isinstance(error, InternalError)
    assert (error.http_status, error.code) == (503, "DATABASE_ERROR")
    assert error.message == "Database insert failed"
    assert error.category is ErrorCategory.DATABASE
