from alumni_portal.core.errors import NetworkError, ServerError, ValidationError, get_error_message


class TestGetErrorMessage:

    def test_details_hidden_by_default_gate(self):
        error = ValidationError("Unsupported session status", details={"allowed": ["completed"]})
        body = get_error_message(error, include_details=False)

        assert body == {
            "success": False,
            "error_code": "VALIDATION_ERROR",
            "message": "Unsupported session status",
            "status_code": 422,
        }

    def test_details_included_when_asked(self):
        error = ServerError("Portal backend returned 500", status_code=500, details={"path": "/api/sessions"})
        body = get_error_message(error, include_details=True)

        assert body["status_code"] == 500
        assert body["details"] == {"path": "/api/sessions"}
        assert body["error_type"] == "ServerError"
        assert "traceback" not in body

    def test_traceback_for_raised_errors(self):
        try:
            raise NetworkError()
        except NetworkError as e:
            body = get_error_message(e)
        assert body["error_code"] == "NETWORK_ERROR"
        assert "details" not in body
        assert body["traceback"]
