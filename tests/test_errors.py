from ukt_console.app.core.errors import DecodeError, FetchError, flatten_error_message


def test_field_errors_win_over_message():
    body = {
        "status": "error",
        "message": "The given data was invalid.",
        "errors": {"nim": ["The nim has already been taken."], "email": ["Invalid email.", "Too long."]},
    }
    assert flatten_error_message(body) == "The nim has already been taken. | Invalid email. | Too long."


def test_plain_message_is_used():
    assert flatten_error_message({"status": "error", "message": "Bill exists"}) == "Bill exists"


def test_structured_message_is_flattened():
    assert flatten_error_message({"message": {"semester": ["Bad semester"]}}) == "Bad semester"


def test_empty_body_falls_back_to_default():
    assert flatten_error_message({}, default="Failed to create bill") == "Failed to create bill"
    assert flatten_error_message(None, default="Failed") == "Failed"


def test_unknown_body_is_serialized():
    assert flatten_error_message({"detail": "nope"}) == '{"detail": "nope"}'


def test_fetch_error_names_resource():
    error = DecodeError("bills", "unexpected response shape")
    assert isinstance(error, FetchError)
    assert error.resource == "bills"
    assert str(error) == "Failed to load bills: unexpected response shape"
