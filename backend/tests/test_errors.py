from app.core.errors import AppError, ErrorKind


def test_status_codes_follow_kind():
    assert AppError.validation("bad").status_code == 400
    assert AppError.unauthorized().status_code == 401
    assert AppError.forbidden().status_code == 403
    assert AppError.not_found("gone").status_code == 404
    assert AppError.storage("boom").status_code == 500
    assert AppError.internal().status_code == 500


def test_payload_keeps_client_safe_messages():
    error = AppError.validation("Validation failed", details=[{"path": "x", "message": "y"}])
    assert error.to_payload() == {
        "error": "ValidationError",
        "message": "Validation failed",
        "statusCode": 400,
        "details": [{"path": "x", "message": "y"}],
    }


def test_payload_hides_storage_and_internal_messages_unless_debug():
    error = AppError.storage("bucket secret-bucket unreachable")
    assert error.to_payload()["message"] == "Storage service error"
    assert error.to_payload(debug=True)["message"] == "bucket secret-bucket unreachable"
    assert AppError(ErrorKind.INTERNAL, "trace").to_payload()["message"] == "Internal server error"
