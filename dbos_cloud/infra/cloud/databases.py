"""Database administration client for the cloud control plane.

Every operation follows the same shape: resolve credentials, send one
authenticated JSON request to the organization-scoped databases API, report
the outcome and return a process exit code (0 on success, 1 on failure).
Provisioning and restore can additionally wait for the instance to become
ready.

Example:
    ```python
    client = DatabaseAdminClient(credentials=FileCredentialProvider())
    code = await client.create_database(
        "cloud.dbos.dev", "orders", "admin", "s3cretPassw0rd", wait_for_ready=True
    )
    ```
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from dbos_cloud.infra.cloud.credentials import CloudCredentials, CredentialProvider
from dbos_cloud.infra.cloud.errors import ErrorClassifier
from dbos_cloud.infra.cloud.models import (
    CreateDatabaseRequest,
    DatabaseInstanceList,
    DatabaseInstanceRecord,
    LinkDatabaseRequest,
    ResetCredentialsRequest,
    RestoreDatabaseRequest,
)
from dbos_cloud.infra.config import (
    apply_database_connection,
    backup_config,
    load_config,
    save_config,
)
from dbos_cloud.infra.constants import CLOUD, CloudConstants
from dbos_cloud.utils.console_like import ConsoleLike, coalesce_console

# Failures that are reported and mapped to exit code 1. ValueError covers
# undecodable JSON bodies and pydantic validation errors.
REQUEST_FAILURES: tuple[type[Exception], ...] = (httpx.HTTPError, ValueError)

Sleep = Callable[[float], Awaitable[None]]

_COMPACT_JSON = (",", ":")


def validate_password(password: str, constants: CloudConstants = CLOUD) -> str | None:
    """Check a database password against the control plane's rules.

    Returns:
        None if the password is acceptable, otherwise the message to report
    """
    if not (
        constants.PASSWORD_MIN_LENGTH <= len(password) <= constants.PASSWORD_MAX_LENGTH
    ):
        return (
            "Invalid database password. Passwords must be between "
            f"{constants.PASSWORD_MIN_LENGTH} and {constants.PASSWORD_MAX_LENGTH} "
            "characters long"
        )
    if any(char in password for char in constants.PASSWORD_FORBIDDEN_CHARS):
        return (
            "Password contains invalid character. Passwords can contain any ASCII "
            "character except @, /, \\, \", ', and spaces"
        )
    return None


def format_instance(record: DatabaseInstanceRecord) -> list[str]:
    """Human-readable lines for one instance."""
    return [
        f"Postgres Instance Name: {record.instance_name}",
        f"Status: {record.status}",
        f"Host Name: {record.host_name}",
        f"Port: {record.port}",
        f"Database Username: {record.database_username}",
    ]


class DatabaseAdminClient:
    """Issues database administration requests against the control plane.

    Collaborators are injected so that each one can be replaced in tests:
    the credential provider is asked for credentials on every call, the
    classifier reports failures, and ``transport``/``sleep`` stand in for
    the network and the polling clock.
    """

    def __init__(
        self,
        *,
        credentials: CredentialProvider,
        console: ConsoleLike | None = None,
        classifier: ErrorClassifier | None = None,
        config_path: Path | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
        timeout: float = CLOUD.REQUEST_TIMEOUT,
        constants: CloudConstants = CLOUD,
    ) -> None:
        self._credentials = credentials
        self._console = coalesce_console(console)
        self._classifier = classifier or ErrorClassifier(self._console)
        self._constants = constants
        self.config_path = config_path or constants.default_config_path
        self._transport = transport
        self._sleep = sleep
        self._timeout = timeout

    # =========================================================================
    # Public API
    # =========================================================================

    async def create_database(
        self,
        host: str,
        name: str,
        admin_user: str,
        admin_password: str,
        wait_for_ready: bool,
    ) -> int:
        """Provision a managed database instance."""
        if not self._check_password(admin_password):
            return 1

        body = CreateDatabaseRequest(
            name=name, admin_name=admin_user, admin_password=admin_password
        )
        try:
            await self._request("POST", host, "/userdb", body=body.to_wire())
            self._console.info(f"Successfully started provisioning database: {name}")

            if wait_for_ready:
                await self.wait_until_ready(host, name)
            self._console.ok("Database successfully provisioned!")
            return 0
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to create database {name}", e)

    async def link_existing_database(
        self,
        host: str,
        name: str,
        hostname: str,
        port: int,
        password: str,
        enable_provenance: bool,
    ) -> int:
        """Register an externally hosted Postgres instance."""
        if not self._check_password(password):
            return 1

        self._console.info(
            f"Linking Postgres instance {name} to the cloud. Hostname: {hostname} "
            f"Port: {port} Time travel: {enable_provenance}"
        )
        body = LinkDatabaseRequest(
            name=name,
            host_name=hostname,
            port=port,
            password=password,
            capture_provenance=enable_provenance,
        )
        try:
            await self._request("POST", host, "/byod", body=body.to_wire())
            self._console.ok("Database successfully linked!")
            return 0
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to link database {name}", e)

    async def delete_database(self, host: str, name: str) -> int:
        """Destroy a managed database instance."""
        try:
            await self._request("DELETE", host, f"/userdb/{name}")
            self._console.ok(f"Database deleted: {name}")
            return 0
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to delete database {name}", e)

    async def unlink_database(self, host: str, name: str) -> int:
        """Remove a linked instance from the control plane."""
        try:
            await self._request("DELETE", host, f"/byod/{name}")
            self._console.ok(f"Database unlinked: {name}")
            return 0
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to unlink database {name}", e)

    async def get_instance_info(self, host: str, name: str) -> DatabaseInstanceRecord:
        """Fetch one instance record.

        Raises:
            httpx.HTTPError: If the request fails
            ValueError: If the response body is not a valid instance record
        """
        response = await self._request("GET", host, f"/userdb/info/{name}")
        return DatabaseInstanceRecord.model_validate(response.json())

    async def get_database(self, host: str, name: str, as_json: bool) -> int:
        """Print one instance record."""
        try:
            record = await self.get_instance_info(host, name)
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to retrieve database record {name}", e)

        if as_json:
            self._console.echo(json.dumps(record.to_wire(), separators=_COMPACT_JSON))
        else:
            self._echo_lines(format_instance(record))
        return 0

    async def list_databases(self, host: str, as_json: bool) -> int:
        """Print every instance of the organization."""
        try:
            response = await self._request("GET", host, "")
            payload = response.json()
            records = DatabaseInstanceList.validate_python(payload)
        except REQUEST_FAILURES as e:
            return self._fail("Failed to retrieve info", e)

        if as_json:
            payload = [record.to_wire() for record in records]
            self._console.echo(json.dumps(payload, separators=_COMPACT_JSON))
            return 0

        if not records:
            self._console.info("No database instances found")
        for record in records:
            self._echo_lines(format_instance(record))
        return 0

    async def reset_credentials(self, host: str, name: str, new_password: str) -> int:
        """Reset the admin password of a managed instance."""
        if not self._check_password(new_password):
            return 1

        body = ResetCredentialsRequest(password=new_password)
        try:
            await self._request(
                "POST", host, f"/userdb/{name}/credentials", body=body.to_wire()
            )
            self._console.ok(f"Successfully reset user password for database: {name}")
            return 0
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to reset user password for database {name}", e)

    async def restore_database(
        self,
        host: str,
        name: str,
        target_name: str,
        restore_timestamp: str,
        wait_for_ready: bool,
    ) -> int:
        """Restore ``name`` as of ``restore_timestamp`` into a new instance."""
        body = RestoreDatabaseRequest(
            restore_name=target_name, restore_timestamp=restore_timestamp
        )
        try:
            await self._request(
                "POST", host, f"/userdb/{name}/restore", body=body.to_wire()
            )
            self._console.info(
                f"Successfully started restoring database: {name}! "
                f"New database name: {target_name}, restore time: {restore_timestamp}"
            )

            if wait_for_ready:
                await self.wait_until_ready(host, target_name)
            self._console.ok(
                f"Database successfully restored! New database name: {target_name}, "
                f"restore time: {restore_timestamp}"
            )
            return 0
        except REQUEST_FAILURES as e:
            return self._fail(f"Failed to restore database {name}", e)

    async def connect_local_config(self, host: str, name: str, password: str) -> int:
        """Load an instance's connection settings into the local config file.

        The file is backed up before anything else happens; a missing file
        aborts the operation without contacting the control plane.
        """
        config_path = self.config_path
        if not config_path.exists():
            self._console.error(f"Error: {config_path} not found")
            return 1

        label = f"Failed to retrieve database record {name}"
        try:
            backup_path = backup_config(config_path)
            self._console.info(f"Backing up {config_path} to {backup_path}")

            self._console.info("Retrieving cloud database info...")
            record = await self.get_instance_info(host, name)
            self._echo_lines(
                [
                    f"Postgres Instance Name: {record.instance_name}",
                    f"Host Name: {record.host_name}",
                    f"Port: {record.port}",
                    f"Database Username: {record.database_username}",
                    f"Status: {record.status}",
                ]
            )

            self._console.info(
                f"Loading cloud database connection information into {config_path}..."
            )
            config = load_config(config_path)
            apply_database_connection(
                config,
                hostname=record.host_name,
                port=record.port,
                username=record.database_username,
                password=password,
            )
            save_config(config, config_path)
        except (*REQUEST_FAILURES, OSError) as e:
            return self._fail(label, e)

        self._console.ok(
            f"Cloud database connection information loaded into {config_path}"
        )
        return 0

    async def wait_until_ready(self, host: str, name: str) -> DatabaseInstanceRecord:
        """Poll an instance until it reports a ready status.

        Waits FIRST_POLL_DELAY before the first check and POLL_INTERVAL
        between later checks. There is no deadline; interrupt the process to
        stop waiting.
        """
        delay = self._constants.FIRST_POLL_DELAY
        while True:
            await self._sleep(delay)
            record = await self.get_instance_info(host, name)
            self._console.info(
                f"{record.instance_name}: {record.status} "
                f"({record.host_name}:{record.port})"
            )
            if record.status in self._constants.READY_STATUSES:
                return record
            delay = self._constants.POLL_INTERVAL

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_password(self, password: str) -> bool:
        problem = validate_password(password, self._constants)
        if problem is not None:
            self._console.error(problem)
            return False
        return True

    def _fail(self, label: str, error: Exception) -> int:
        self._classifier.report(label, error)
        return 1

    def _echo_lines(self, lines: list[str]) -> None:
        for line in lines:
            self._console.echo(line)

    def _headers(self, credentials: CloudCredentials) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": credentials.bearer,
        }

    async def _request(
        self,
        method: str,
        host: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        credentials = self._credentials.get_credentials()
        url = self._constants.databases_url(host, credentials.organization) + path

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            headers=self._headers(credentials),
        ) as client:
            logger.debug(f"{method} {url}")
            response = await client.request(method, url, json=body)
            logger.debug(f"{method} {url} -> {response.status_code}")
            response.raise_for_status()
            return response
