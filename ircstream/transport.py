"""Socket-backed byte stream for plain and TLS connections."""

from __future__ import annotations

import logging
import socket
import ssl
from typing import Any

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .config.model import ConnectionConfig
from .constants import IRC_CONNECT_BACKOFF_MAX
from .errors import TransportError
from .logs.logger import logger


class SocketTransport:
    """Blocking read / write / flush / try_clone over a connected socket.

    TLS sockets cannot be duplicated at the OS level, so clones of a TLS
    transport share the same socket object; closing one closes both.
    """

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    def read(self, size: int) -> bytes:
        return self.sock.recv(size)

    def write(self, data: bytes) -> int:
        self.sock.sendall(data)
        return len(data)

    def flush(self) -> None:
        # sendall() hands everything to the kernel; nothing is buffered here.
        return None

    def try_clone(self) -> SocketTransport:
        if isinstance(self.sock, ssl.SSLSocket):
            return SocketTransport(self.sock)
        return SocketTransport(self.sock.dup())

    def close(self) -> None:
        self.sock.close()
        logger.log_event("transport", "close", level=logging.DEBUG)

    def __enter__(self) -> SocketTransport:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _is_retryable(exc: BaseException) -> bool:
    # Certificate and handshake failures will not fix themselves.
    return isinstance(exc, OSError) and not isinstance(exc, ssl.SSLError)


def _open_socket(config: ConnectionConfig) -> socket.socket:
    sock = socket.create_connection(config.address, timeout=config.timeout)
    if config.tls:
        context = ssl.create_default_context()
        try:
            sock = context.wrap_socket(sock, server_hostname=config.host)
        except OSError:
            sock.close()
            raise
    sock.settimeout(config.read_timeout)
    return sock


def connect(
    config: ConnectionConfig, *, wait: wait_base | None = None
) -> SocketTransport:
    """Open a connection described by ``config``, retrying transient failures.

    Args:
        config: Connection settings.
        wait: Tenacity wait strategy between attempts. Defaults to
            exponential backoff capped at ``IRC_CONNECT_BACKOFF_MAX``.

    Returns:
        A connected SocketTransport.

    Raises:
        TransportError: If every attempt failed.
    """
    host, port = config.address
    logger.log_event("transport", "connect", host=host, port=port, tls=config.tls)

    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.log_event(
            "transport",
            "connect_retry",
            level=logging.WARNING,
            host=host,
            port=port,
            attempt=retry_state.attempt_number,
            error=str(error),
        )

    retrying = Retrying(
        stop=stop_after_attempt(config.connect_attempts),
        wait=wait or wait_exponential(multiplier=1, max=IRC_CONNECT_BACKOFF_MAX),
        retry=retry_if_exception(_is_retryable),
        before_sleep=before_sleep,
        reraise=True,
    )
    try:
        sock = retrying(_open_socket, config)
    except OSError as e:
        logger.log_event(
            "transport",
            "connect_failed",
            level=logging.ERROR,
            host=host,
            port=port,
            attempts=config.connect_attempts,
            error=str(e),
        )
        raise TransportError(f"Could not connect to {host}:{port}: {e}") from e

    logger.log_event("transport", "connected", host=host, port=port)
    return SocketTransport(sock)


__all__ = ["SocketTransport", "connect"]
