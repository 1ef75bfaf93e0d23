from __future__ import annotations

import httpx
import pytest

from gemawait.exceptions import (
    AwaitError,
    InvalidIdentifierError,
    RegistryFormatError,
    RegistryRequestError,
)

TEST_URL = "https://rubygems.org/versions"


############################################
#     Tests for InvalidIdentifierError     #
############################################


def test_invalid_identifier_error_hierarchy() -> None:
    error = InvalidIdentifierError("Please specify a valid version, given 'foo:bar'")
    assert isinstance(error, AwaitError)
    assert isinstance(error, ValueError)
    assert str(error) == "Please specify a valid version, given 'foo:bar'"


##########################################
#     Tests for RegistryRequestError     #
##########################################


def test_registry_request_error_status_code() -> None:
    error = RegistryRequestError(
        url=TEST_URL, message=f"GET {TEST_URL} failed with status 503", status_code=503
    )
    assert isinstance(error, AwaitError)
    assert str(error) == "GET https://rubygems.org/versions failed with status 503"
    assert error.url == TEST_URL
    assert error.status_code == 503
    assert error.cause is None
    assert error.__cause__ is None


def test_registry_request_error_cause() -> None:
    cause = httpx.ConnectError("connection refused")
    error = RegistryRequestError(url=TEST_URL, message="failed", cause=cause)
    assert error.status_code is None
    assert error.cause is cause
    assert error.__cause__ is cause


def test_registry_format_error_is_request_error() -> None:
    with pytest.raises(RegistryRequestError, match=r"Cannot decode"):
        raise RegistryFormatError(url=TEST_URL, message=f"Cannot decode {TEST_URL}")
