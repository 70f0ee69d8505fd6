import pytest

from modsel.errors import ModselError, validate_error_type


def test_error_taxonomy_known():
    assert validate_error_type("duplicate-module-id") == "duplicate-module-id"
    assert validate_error_type("config-out-of-range") == "config-out-of-range"
    assert validate_error_type("session-not-found") == "session-not-found"


def test_error_taxonomy_unknown():
    with pytest.raises(AssertionError):
        validate_error_type("not-a-code")


def test_exception_carries_code():
    err = ModselError("bad", "session-closed")
    assert err.error_type == "session-closed"
    assert ModselError("plain").error_type == "config-invalid"
    with pytest.raises(AssertionError):
        ModselError("bad", "nope")
