"""Tests for CLI context dependency injection."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer

from dbos_cloud.cli.context import CLIContext, build_cli_context, get_cli_context
from dbos_cloud.infra.cloud import DatabaseAdminClient, FileCredentialProvider
from dbos_cloud.infra.constants import CLOUD


def make_context(**overrides) -> CLIContext:
    values = dict(
        console=Mock(),
        host="cloud.example.test",
        credentials=Mock(),
        constants=CLOUD,
    )
    values.update(overrides)
    return CLIContext(**values)


def test_cli_context_is_immutable():
    """Test that CLIContext is frozen/immutable."""
    ctx = make_context()

    with pytest.raises(AttributeError):
        ctx.host = "other"  # type: ignore[misc]


def test_build_cli_context_creates_all_dependencies():
    """Test that build_cli_context creates all required dependencies."""
    ctx = build_cli_context("cloud.example.test")

    assert ctx.console is not None
    assert ctx.host == "cloud.example.test"
    assert isinstance(ctx.credentials, FileCredentialProvider)
    assert ctx.constants is CLOUD


def test_build_cli_context_defaults_host():
    assert build_cli_context().host == CLOUD.DEFAULT_DOMAIN


def test_database_client_uses_context_collaborators():
    credentials = Mock()
    ctx = make_context(credentials=credentials)

    client = ctx.database_client(config_path=Path("/tmp/app/dbos-config.yaml"))

    assert isinstance(client, DatabaseAdminClient)
    assert client.config_path == Path("/tmp/app/dbos-config.yaml")


def test_database_client_defaults_config_path():
    client = make_context().database_client()

    assert client.config_path == Path("dbos-config.yaml")


def test_get_cli_context_from_typer_context():
    """Test that get_cli_context retrieves from Typer context."""
    mock_ctx_obj = make_context()

    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = mock_ctx_obj

    result = get_cli_context(typer_ctx)

    assert result is mock_ctx_obj


def test_get_cli_context_with_invalid_obj_falls_back():
    """Test that get_cli_context falls back when ctx.obj is not CLIContext."""
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = "invalid"

    with patch("dbos_cloud.cli.context.build_cli_context") as mock_build:
        mock_build.return_value = Mock(spec=CLIContext)

        get_cli_context(typer_ctx)

        mock_build.assert_called_once()


@patch("click.get_current_context")
def test_get_cli_context_uses_click_context_as_fallback(mock_get_click_ctx):
    """Test that get_cli_context uses click context when typer ctx is None."""
    mock_ctx_obj = make_context()

    mock_click_context = Mock()
    mock_click_context.obj = mock_ctx_obj
    mock_get_click_ctx.return_value = mock_click_context

    result = get_cli_context(None)

    assert result is mock_ctx_obj
    mock_get_click_ctx.assert_called_once_with(silent=True)
