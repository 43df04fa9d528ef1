"""Wire models for the databases API.

Field names on the wire are PascalCase; the models expose snake_case
attributes and serialize back through their aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class DatabaseInstanceRecord(BaseModel):
    """A database instance as reported by the control plane.

    Fields the client does not know about are kept so that JSON output
    relays the record unchanged. Connection fields stay empty while the
    instance is still being provisioned.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    instance_name: str | None = Field(default=None, alias="PostgresInstanceName")
    status: str = Field(alias="Status")
    host_name: str | None = Field(default=None, alias="HostName")
    port: int | None = Field(default=None, alias="Port")
    database_username: str | None = Field(default=None, alias="DatabaseUsername")

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


DatabaseInstanceList = TypeAdapter(list[DatabaseInstanceRecord])


class _RequestBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class CreateDatabaseRequest(_RequestBody):
    name: str = Field(alias="Name")
    admin_name: str = Field(alias="AdminName")
    admin_password: str = Field(alias="AdminPassword")


class LinkDatabaseRequest(_RequestBody):
    name: str = Field(alias="Name")
    host_name: str = Field(alias="HostName")
    port: int = Field(alias="Port")
    password: str = Field(alias="Password")
    capture_provenance: bool = Field(alias="captureProvenance")


class ResetCredentialsRequest(_RequestBody):
    password: str = Field(alias="Password")


class RestoreDatabaseRequest(_RequestBody):
    restore_name: str = Field(alias="RestoreName")
    restore_timestamp: str = Field(alias="RestoreTimestamp")
