from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants import (
    IRC_CONNECT_ATTEMPTS,
    IRC_CONNECT_TIMEOUT,
    IRC_DEFAULT_PORT,
    IRC_DEFAULT_TLS_PORT,
    IRC_MAX_LINE_LENGTH,
    IRC_READ_CHUNK_SIZE,
    IRC_RFC_LINE_LENGTH,
)


class ConnectionConfig(BaseModel):
    """Settings for one connection to an IRC server.

    Attributes:
        host: Server hostname or address.
        port: TCP port. Defaults to the plain or TLS well-known port.
        tls: Whether to wrap the socket in TLS.
        timeout: Connect timeout in seconds, or None to block.
        read_timeout: Socket timeout once connected; None (the default) blocks
            until data arrives, leaving liveness checks to the application.
        connect_attempts: How many times to try connecting before giving up.
        read_chunk_size: Bytes requested from the socket per read.
        max_line_length: Buffered bytes without a line feed before discarding.
    """

    host: str = Field(min_length=1)
    port: int | None = Field(default=None, ge=1, le=65535)
    tls: bool = False
    timeout: float | None = Field(default=IRC_CONNECT_TIMEOUT, gt=0)
    read_timeout: float | None = Field(default=None, gt=0)
    connect_attempts: int = Field(default=IRC_CONNECT_ATTEMPTS, ge=1)
    read_chunk_size: int = Field(default=IRC_READ_CHUNK_SIZE, ge=1)
    max_line_length: int = Field(default=IRC_MAX_LINE_LENGTH, ge=IRC_RFC_LINE_LENGTH)

    @field_validator("host", mode="before")
    @classmethod
    def validate_host(cls, v: Any) -> str:
        """Strip whitespace; reject hosts containing spaces."""
        if not isinstance(v, str):
            raise ValueError("host must be a string")
        stripped = v.strip()
        if " " in stripped:
            raise ValueError("host must not contain spaces")
        return stripped

    @model_validator(mode="after")
    def default_port(self) -> ConnectionConfig:
        if self.port is None:
            self.port = IRC_DEFAULT_TLS_PORT if self.tls else IRC_DEFAULT_PORT
        return self

    @property
    def address(self) -> tuple[str, int]:
        return self.host, int(self.port or IRC_DEFAULT_PORT)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionConfig:
        """Create ConnectionConfig from a dictionary.

        Args:
            data: Dictionary containing connection settings.

        Returns:
            ConnectionConfig instance.
        """
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
