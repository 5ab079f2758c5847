from xts_interactive.errors import InteractiveError, Outcome, TransportError, failed


def test_interactive_error_fields():
    err = InteractiveError("Something failed", "trace", 404)
    assert err.message == "Something failed"
    assert err.stack == "trace"
    assert err.status_code == 404
    assert str(err) == "Something failed"
    assert err.to_dict() == {"message": "Something failed", "stack": "trace", "statusCode": 404}


def test_default_status_code():
    assert InteractiveError("x").status_code == 500


def test_read_only():
    err = InteractiveError("x", None, 400)
    try:
        err.status_code = 200
    except AttributeError:
        pass
    assert err.status_code == 400


def test_from_exception_keeps_status_and_trace():
    try:
        raise TransportError(TransportError.RESPONSE, "Bad Request", status_code=400)
    except TransportError as e:
        err = InteractiveError.from_exception(e, "fallback")
    assert err.message == "Bad Request"
    assert err.status_code == 400
    assert "TransportError" in err.stack


def test_from_exception_fallback_message():
    err = InteractiveError.from_exception(ValueError(), "Place order operation failed.")
    assert err.message == "Place order operation failed."
    assert err.status_code == 500


def test_from_exception_returns_same_instance():
    original = InteractiveError("x")
    assert InteractiveError.from_exception(original, "fallback") is original


def test_failed_outcome():
    outcome = failed("Login is Required", "login is mandatory", 404)
    assert isinstance(outcome, Outcome)
    assert outcome.ok is False
    assert outcome.error.status_code == 404
    assert Outcome(True).error is None
