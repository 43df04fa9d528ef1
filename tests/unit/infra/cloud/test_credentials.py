"""Tests for cloud credential resolution."""

import json
from pathlib import Path

import pytest

from dbos_cloud.infra.cloud import (
    CloudCredentials,
    CloudCredentialsError,
    FileCredentialProvider,
    StaticCredentialProvider,
)


def write_credentials(directory: Path, payload: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "credentials"
    path.write_text(json.dumps(payload))
    return path


def test_reads_credentials_file(tmp_path):
    write_credentials(
        tmp_path / ".dbos",
        {"token": "tok-1", "userName": "alice", "organization": "acme"},
    )

    credentials = FileCredentialProvider(tmp_path / ".dbos").get_credentials()

    assert credentials.token == "tok-1"
    assert credentials.user_name == "alice"
    assert credentials.organization == "acme"
    assert credentials.bearer == "Bearer tok-1"


def test_rereads_file_on_every_call(tmp_path):
    directory = tmp_path / ".dbos"
    write_credentials(directory, {"token": "old", "organization": "acme"})
    provider = FileCredentialProvider(directory)

    assert provider.get_credentials().token == "old"

    write_credentials(directory, {"token": "new", "organization": "acme"})
    assert provider.get_credentials().token == "new"


def test_missing_file_raises(tmp_path):
    provider = FileCredentialProvider(tmp_path / ".dbos")

    with pytest.raises(CloudCredentialsError) as excinfo:
        provider.get_credentials()

    assert excinfo.value.message == "Not logged in to the cloud control plane"
    assert str(tmp_path / ".dbos" / "credentials") in excinfo.value.details


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({"userName": "alice"}),
        json.dumps({"token": "", "organization": "acme"}),
        json.dumps(["token"]),
    ],
)
def test_malformed_file_raises(tmp_path, content):
    directory = tmp_path / ".dbos"
    directory.mkdir()
    (directory / "credentials").write_text(content)

    with pytest.raises(CloudCredentialsError) as excinfo:
        FileCredentialProvider(directory).get_credentials()

    assert excinfo.value.message.startswith("Unable to read cloud credentials")


def test_directory_from_environment(tmp_path, monkeypatch):
    directory = tmp_path / "elsewhere"
    write_credentials(directory, {"token": "tok-env", "organization": "acme"})
    monkeypatch.setenv("DBOS_CREDENTIALS_DIR", str(directory))

    provider = FileCredentialProvider()

    assert provider.path == directory / "credentials"
    assert provider.get_credentials().token == "tok-env"


def test_token_is_not_in_repr():
    credentials = CloudCredentials(token="super-secret", organization="acme")

    assert "super-secret" not in repr(credentials)


def test_static_provider_returns_given_credentials():
    credentials = CloudCredentials(token="tok", organization="acme")

    assert StaticCredentialProvider(credentials).get_credentials() is credentials
