r"""Unit tests for the concrete awaiters."""

from __future__ import annotations

import logging
from unittest.mock import Mock, call

import pytest

from gemawait.awaiters import (
    DependencyAPIAwaiter,
    FullIndexAwaiter,
    GemsAwaiter,
    GemspecsAwaiter,
    InfoAwaiter,
    NamesAwaiter,
    PrereleaseIndexAwaiter,
    VersionsAwaiter,
)
from gemawait.callbacks import CallbackConfig
from gemawait.deadline import Deadline
from gemawait.exceptions import RegistryRequestError
from gemawait.identifier import PackageIdentifier

STABLE = PackageIdentifier("foo", "1.0.0")
PRERELEASE = PackageIdentifier("foo", "2.0.0.pre.1")

##################################
#     Tests for NamesAwaiter     #
##################################


@pytest.mark.asyncio
async def test_names_awaiter_found(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline, foo: PackageIdentifier, bar: PackageIdentifier
) -> None:
    mock_client.list_names.return_value = ["baz", "foo", "bar"]

    result = await NamesAwaiter([foo, bar], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 1


@pytest.mark.asyncio
async def test_names_awaiter_confirms_whole_group(
    mock_client: Mock,
    mock_asleep: Mock,
    deadline: Deadline,
    foo: PackageIdentifier,
    foo_java: PackageIdentifier,
) -> None:
    on_found = Mock()
    mock_client.list_names.return_value = ["foo"]

    result = await NamesAwaiter(
        [foo, foo_java], mock_client, deadline, callbacks=CallbackConfig(on_found=on_found)
    ).run()

    assert result.success
    assert on_found.call_count == 2


@pytest.mark.asyncio
async def test_names_awaiter_partial(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline, foo: PackageIdentifier, bar: PackageIdentifier
) -> None:
    mock_client.list_names.side_effect = [["foo"], ["foo", "bar"]]

    result = await NamesAwaiter([foo, bar], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 2


#####################################
#     Tests for VersionsAwaiter     #
#####################################


@pytest.mark.asyncio
async def test_versions_awaiter_normalized_platforms(
    mock_client: Mock,
    mock_asleep: Mock,
    deadline: Deadline,
    foo: PackageIdentifier,
    foo_java: PackageIdentifier,
) -> None:
    mock_client.list_versions.return_value = {"foo": [("1.0.0", "ruby"), ("1.0.0", "java")]}

    result = await VersionsAwaiter([foo, foo_java], mock_client, deadline).run()

    assert result.success


@pytest.mark.asyncio
async def test_versions_awaiter_other_platform_not_confirmed(
    mock_client: Mock, mock_asleep: Mock, foo_java: PackageIdentifier
) -> None:
    mock_client.list_versions.return_value = {"foo": {("1.0.0", None)}}

    result = await VersionsAwaiter([foo_java], mock_client, Deadline.after(2)).run()

    assert result.missing == {foo_java}


#################################
#     Tests for InfoAwaiter     #
#################################


@pytest.mark.asyncio
async def test_info_awaiter_found(
    mock_client: Mock,
    mock_asleep: Mock,
    deadline: Deadline,
    foo: PackageIdentifier,
    foo_java: PackageIdentifier,
    bar: PackageIdentifier,
) -> None:
    mock_client.fetch_info.side_effect = lambda name: {
        "foo": [("0.9.0", None), ("1.0.0", None), ("1.0.0", "java")],
        "bar": [("2.0.0.pre.1", "")],
    }[name]

    result = await InfoAwaiter([foo, foo_java, bar], mock_client, deadline).run()

    assert result.success
    assert mock_client.fetch_info.call_args_list == [call("bar"), call("foo")]


@pytest.mark.asyncio
async def test_info_awaiter_fetch_error_isolated(
    mock_client: Mock,
    mock_asleep: Mock,
    deadline: Deadline,
    foo: PackageIdentifier,
    bar: PackageIdentifier,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test that a failed info fetch does not prevent checking other packages."""
    mock_client.fetch_info.side_effect = [
        RegistryRequestError(url="https://rubygems.org/info/bar", message="bar failed"),
        [("1.0.0", None)],
        [("2.0.0.pre.1", None)],
    ]

    with caplog.at_level(logging.WARNING, logger="gemawait"):
        result = await InfoAwaiter([foo, bar], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 2
    assert mock_client.fetch_info.call_args_list == [call("bar"), call("foo"), call("bar")]
    assert [record.getMessage() for record in caplog.records] == ["bar failed"]


#####################################
#     Tests for GemspecsAwaiter     #
#####################################


@pytest.mark.asyncio
async def test_gemspecs_awaiter_found(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline, foo: PackageIdentifier
) -> None:
    mock_client.fetch_gemspec.return_value = True

    result = await GemspecsAwaiter([foo], mock_client, deadline).run()

    assert result.success
    mock_client.fetch_gemspec.assert_called_once_with(foo)


@pytest.mark.asyncio
async def test_gemspecs_awaiter_not_found_then_found(
    mock_client: Mock,
    mock_asleep: Mock,
    deadline: Deadline,
    foo: PackageIdentifier,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test that a forbidden or missing gemspec is not fatal."""
    mock_client.fetch_gemspec.side_effect = [False, True]

    with caplog.at_level(logging.WARNING, logger="gemawait"):
        result = await GemspecsAwaiter([foo], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 2
    assert caplog.records[0].getMessage() == "foo-1.0.0.gemspec.rz not found"
    assert caplog.records[0].tags == ["not found"]


@pytest.mark.asyncio
async def test_gemspecs_awaiter_error_is_not_fatal(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline, foo: PackageIdentifier, bar: PackageIdentifier
) -> None:
    mock_client.fetch_gemspec.side_effect = [True, RegistryRequestError(url="u", message="boom"), True]

    result = await GemspecsAwaiter([foo, bar], mock_client, deadline).run()

    assert result.success
    assert mock_client.fetch_gemspec.call_args_list == [call(bar), call(foo), call(foo)]


#################################
#     Tests for GemsAwaiter     #
#################################


@pytest.mark.asyncio
async def test_gems_awaiter_found(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline, foo_java: PackageIdentifier
) -> None:
    mock_client.fetch_gem.side_effect = [RegistryRequestError(url="u", message="boom"), False, True]

    result = await GemsAwaiter([foo_java], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 3
    assert mock_client.fetch_gem.call_args_list == [call(foo_java)] * 3


@pytest.mark.asyncio
async def test_gems_awaiter_timeout(mock_client: Mock, mock_asleep: Mock, foo: PackageIdentifier) -> None:
    mock_client.fetch_gem.return_value = False

    result = await GemsAwaiter([foo], mock_client, Deadline.after(2)).run()

    assert result.missing == {foo}


######################################
#     Tests for the index awaiters     #
######################################


def test_full_index_awaiter_excludes_prereleases(mock_client: Mock, deadline: Deadline) -> None:
    awaiter = FullIndexAwaiter([STABLE, PRERELEASE], mock_client, deadline)
    assert awaiter.initial_missing() == {"foo": {STABLE}}


def test_prerelease_index_awaiter_keeps_prereleases(mock_client: Mock, deadline: Deadline) -> None:
    awaiter = PrereleaseIndexAwaiter([STABLE, PRERELEASE], mock_client, deadline)
    assert awaiter.initial_missing() == {"foo": {PRERELEASE}}


@pytest.mark.asyncio
async def test_full_index_awaiter_found(mock_client: Mock, mock_asleep: Mock, deadline: Deadline) -> None:
    mock_client.fetch_full_index.return_value = [("bar", "1.0.0", "ruby"), ("foo", "1.0.0", "ruby")]

    result = await FullIndexAwaiter([STABLE, PRERELEASE], mock_client, deadline).run()

    assert result.success
    mock_client.fetch_full_index.assert_called_once_with()
    mock_client.fetch_prerelease_index.assert_not_called()


@pytest.mark.asyncio
async def test_prerelease_index_awaiter_found(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline
) -> None:
    mock_client.fetch_prerelease_index.side_effect = [[], [("foo", "2.0.0.pre.1", None)]]

    result = await PrereleaseIndexAwaiter([STABLE, PRERELEASE], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 2
    mock_client.fetch_full_index.assert_not_called()


@pytest.mark.asyncio
async def test_prerelease_index_awaiter_nothing_to_await(
    mock_client: Mock, mock_asleep: Mock, deadline: Deadline
) -> None:
    result = await PrereleaseIndexAwaiter([STABLE], mock_client, deadline).run()

    assert result.success
    assert result.iterations == 0
    mock_client.fetch_prerelease_index.assert_not_called()


##########################################
#     Tests for DependencyAPIAwaiter     #
##########################################


@pytest.mark.asyncio
async def test_dependency_api_awaiter_queries_missing_names(
    mock_client: Mock,
    mock_asleep: Mock,
    deadline: Deadline,
    foo: PackageIdentifier,
    foo_java: PackageIdentifier,
    bar: PackageIdentifier,
) -> None:
    mock_client.fetch_dependencies.side_effect = [
        [("bar", "2.0.0.pre.1", "ruby"), ("foo", "1.0.0", "ruby")],
        [("foo", "1.0.0", "java")],
    ]

    result = await DependencyAPIAwaiter([foo, foo_java, bar], mock_client, deadline).run()

    assert result.success
    assert mock_client.fetch_dependencies.call_args_list == [call(["bar", "foo"]), call(["foo"])]
