"""Line framing between a blocking byte stream and IRC messages."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Protocol

from .config.model import ConnectionConfig
from .constants import IRC_MAX_LINE_LENGTH, IRC_READ_CHUNK_SIZE
from .errors import IrcError, LineTooLongError, ParseError, TransportError
from .logs.logger import logger
from .message import Message
from .parser import parse_line


class ByteStream(Protocol):
    """What the framer needs from a connection: blocking read, write, flush."""

    def read(self, size: int, /) -> bytes: ...

    def write(self, data: bytes, /) -> Any: ...

    def flush(self) -> Any: ...


def _describe(raw: bytes) -> str:
    try:
        return raw.rstrip(b"\r\n").decode("utf-8")
    except UnicodeDecodeError:
        return repr(raw)


class IrcStream:
    """Reads and writes IRC messages over a byte stream.

    One instance serves one direction of one connection and is not safe to
    use from two threads at once. For full duplex operation hand a
    :meth:`try_clone` copy to the writing thread.

    Iterating yields messages until the first parse or transport failure,
    then stops for good; use :meth:`next_message` to see why.
    """

    def __init__(
        self,
        transport: ByteStream,
        *,
        read_chunk_size: int = IRC_READ_CHUNK_SIZE,
        max_line_length: int = IRC_MAX_LINE_LENGTH,
        peer: str | None = None,
    ) -> None:
        self.transport = transport
        self.read_chunk_size = read_chunk_size
        self.max_line_length = max_line_length
        self.peer = peer
        self._buffer = bytearray()
        self._discarding = False
        self._iteration_stopped = False

    @classmethod
    def connect(cls, config: ConnectionConfig, **kwargs: Any) -> IrcStream:
        """Connect to the server in ``config`` and wrap the socket."""
        from .transport import connect

        host, port = config.address
        return cls(
            connect(config, **kwargs),
            read_chunk_size=config.read_chunk_size,
            max_line_length=config.max_line_length,
            peer=f"{host}:{port}",
        )

    def try_clone(self) -> IrcStream:
        """A new stream over a cloned transport handle, with an empty buffer."""
        clone = getattr(self.transport, "try_clone", None)
        if clone is None:
            raise TransportError(
                f"{type(self.transport).__name__} does not support try_clone"
            )
        try:
            transport = clone()
        except OSError as e:
            raise TransportError(f"Could not clone transport: {e}") from e
        return type(self)(
            transport,
            read_chunk_size=self.read_chunk_size,
            max_line_length=self.max_line_length,
            peer=self.peer,
        )

    # -- reading -----------------------------------------------------------

    def next_message(self) -> Message:
        """Block until the next complete line arrives and parse it.

        Raises:
            ParseError: The line did not match the grammar. The line has been
                consumed; the stream can keep going.
            TransportError: The transport failed or reached end of stream.
        """
        line = self._read_line()
        try:
            message = parse_line(line)
        except ParseError:
            logger.log_event(
                "stream",
                "parse_error",
                level=logging.WARNING,
                peer=self.peer,
                raw=_describe(line),
            )
            raise
        logger.log_event(
            "stream", "recv", level=logging.DEBUG, peer=self.peer, line=_describe(line)
        )
        return message

    def _read_line(self) -> bytes:
        scan_from = 0
        while True:
            newline = self._buffer.find(b"\n", scan_from)
            if newline != -1:
                line = bytes(self._buffer[: newline + 1])
                del self._buffer[: newline + 1]
                scan_from = 0
                if self._discarding:
                    # Tail of a line that already overflowed.
                    self._discarding = False
                    continue
                return line
            if len(self._buffer) > self.max_line_length:
                self._overflow()
            scan_from = len(self._buffer)
            self._buffer += self._read_chunk()

    def _overflow(self) -> None:
        size = len(self._buffer)
        raw = bytes(self._buffer[:64])
        self._buffer.clear()
        already_reported = self._discarding
        self._discarding = True
        if already_reported:
            return
        logger.log_event(
            "stream",
            "line_too_long",
            level=logging.WARNING,
            peer=self.peer,
            size=size,
            limit=self.max_line_length,
        )
        raise LineTooLongError(
            f"No line feed within {self.max_line_length} bytes", raw, size
        )

    def _read_chunk(self) -> bytes:
        try:
            chunk = self.transport.read(self.read_chunk_size)
        except (OSError, ValueError) as e:
            # Closed file objects raise ValueError rather than OSError.
            logger.log_event(
                "stream", "read_error", level=logging.ERROR, peer=self.peer, error=str(e)
            )
            raise TransportError(f"Read failed: {e}") from e
        if not chunk:
            logger.log_event("stream", "eof", peer=self.peer)
            raise TransportError("Connection closed by peer", eof=True)
        return chunk

    def __iter__(self) -> Iterator[Message]:
        return self

    def __next__(self) -> Message:
        if self._iteration_stopped:
            raise StopIteration
        try:
            return self.next_message()
        except IrcError:
            self._iteration_stopped = True
            raise StopIteration from None

    # -- writing -----------------------------------------------------------

    def send(self, message: Message) -> None:
        """Serialize, terminate, write and flush ``message``.

        Raises:
            SerializationError: ``message`` has no valid wire form; nothing
                was written.
            TransportError: The write or flush failed.
        """
        data = message.to_bytes()
        try:
            self.transport.write(data)
            self.transport.flush()
        except (OSError, ValueError) as e:
            logger.log_event(
                "stream", "write_error", level=logging.ERROR, peer=self.peer, error=str(e)
            )
            raise TransportError(f"Write failed: {e}") from e
        logger.log_event(
            "stream", "send", level=logging.DEBUG, peer=self.peer, line=_describe(data)
        )

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()
        logger.log_event("stream", "close", level=logging.DEBUG, peer=self.peer)

    def __enter__(self) -> IrcStream:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


__all__ = ["ByteStream", "IrcStream"]
