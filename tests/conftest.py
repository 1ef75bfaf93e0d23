from __future__ import annotations

import time
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from gemawait.client.protocol import RegistryClient
from gemawait.deadline import Deadline
from gemawait.identifier import PackageIdentifier

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_client() -> Mock:
    """Create a mock registry client for testing.

    Every method of the registry protocol is an AsyncMock, so tests only
    have to set ``return_value`` or ``side_effect``.
    """
    return Mock(spec=RegistryClient)


@pytest.fixture
def deadline() -> Deadline:
    """Create a deadline far enough for tests that succeed."""
    return Deadline.after(60)


@pytest.fixture
def expired_deadline() -> Deadline:
    """Create a deadline that has already passed."""
    return Deadline(time.time() - 1)


@pytest.fixture
def foo() -> PackageIdentifier:
    return PackageIdentifier("foo", "1.0.0")


@pytest.fixture
def foo_java() -> PackageIdentifier:
    return PackageIdentifier("foo", "1.0.0", "java")


@pytest.fixture
def bar() -> PackageIdentifier:
    return PackageIdentifier("bar", "2.0.0.pre.1")
