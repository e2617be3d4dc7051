"""Tests for binge exception formatting."""

import pytest

from binge.exceptions import (
    BingeError,
    ExtractionError,
    LockError,
    NoMatchingAssetError,
    PersistenceError,
    ReleaseFetchError,
    UnsupportedLayeringError,
)


def test_error_with_target() -> None:
    """Test the target is named in the message."""
    error = ReleaseFetchError("HTTP 404 Not Found", target="acme/tool")

    assert str(error) == (
        "Release fetch failed for 'acme/tool': HTTP 404 Not Found"
    )
    assert error.message == "HTTP 404 Not Found"


def test_error_without_target() -> None:
    """Test the prefix alone is used without a target."""
    assert str(LockError("busy")) == "Lock failed: busy"


@pytest.mark.parametrize(
    "error_class",
    [
        ExtractionError,
        NoMatchingAssetError,
        PersistenceError,
        UnsupportedLayeringError,
    ],
)
def test_errors_share_base(error_class: type[BingeError]) -> None:
    """Test every error can be caught as BingeError."""
    with pytest.raises(BingeError):
        raise error_class("failed")
