"""Tests for perch.errors — the exception hierarchy."""

import dataclasses

import pytest

from perch.errors import (
    ConfigurationError,
    Forbidden,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    PerchError,
    ValidationFailed,
)


class TestHierarchy:
    @pytest.mark.parametrize("cls", [ConfigurationError, HTTPError, NotFound, Forbidden, ValidationFailed])
    def test_everything_is_a_perch_error(self, cls: type) -> None:
        assert issubclass(cls, PerchError)

    def test_http_error_is_frozen(self) -> None:
        err = HTTPError(status=418, detail="teapot")
        with pytest.raises(dataclasses.FrozenInstanceError):
            err.status = 500  # type: ignore[misc]

    def test_str(self) -> None:
        assert str(HTTPError(status=418, detail="teapot")) == "418: teapot"
        assert str(HTTPError(status=500)) == "500"


class TestStatusErrors:
    def test_not_found(self) -> None:
        assert NotFound().status == 404

    def test_method_not_allowed_sets_allow_header(self) -> None:
        err = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert err.status == 405
        assert err.headers == (("Allow", "GET, POST"),)
        assert "GET, POST" in err.detail

    def test_forbidden_default_detail(self) -> None:
        err = Forbidden()
        assert err.status == 403
        assert err.detail == "This action is unauthorized."

    def test_validation_failed_carries_errors(self) -> None:
        err = ValidationFailed({"title": ["This field is required"]})
        assert err.status == 422
        assert err.errors == {"title": ["This field is required"]}
        with pytest.raises(ValidationFailed):
            raise err
