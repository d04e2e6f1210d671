"""
Tests for the IrcStream line framer
"""

import io
import logging
from unittest.mock import Mock

import pytest

from ircstream.catalog import PING, PRIVMSG
from ircstream.errors import (
    LineTooLongError,
    ParseError,
    SerializationError,
    TransportError,
)
from ircstream.message import Message
from ircstream.stream import IrcStream


class TrickleTransport:
    """Hands out the payload a fixed number of bytes per read."""

    def __init__(self, payload: bytes, step: int = 1):
        self.payload = payload
        self.step = step
        self.reads = 0

    def read(self, size: int) -> bytes:
        self.reads += 1
        chunk = self.payload[: min(size, self.step)]
        self.payload = self.payload[len(chunk) :]
        return chunk

    def write(self, data: bytes) -> int:
        return len(data)

    def flush(self) -> None:
        return None


def ping(arg: str) -> Message:
    return Message(None, PING, [arg])


class TestNextMessage:
    """Reading messages from a byte stream"""

    def test_reader_read(self):
        stream = IrcStream(io.BytesIO(b"PING 123\r\nPING 456\r\nPING 789\r\n"))

        assert stream.next_message() == ping("123")
        assert stream.next_message() == ping("456")
        assert stream.next_message() == ping("789")

        with pytest.raises(TransportError) as excinfo:
            stream.next_message()
        assert excinfo.value.eof is True

    def test_one_byte_at_a_time(self):
        transport = TrickleTransport(b"PING 1\r\nPING 2\r\n", step=1)
        stream = IrcStream(transport)

        assert stream.next_message() == ping("1")
        assert stream.next_message() == ping("2")
        assert transport.reads == 16
        with pytest.raises(TransportError):
            stream.next_message()

    def test_bytes_past_terminator_kept_for_next_call(self):
        transport = TrickleTransport(b"PING 1\r\nPI", step=64)
        stream = IrcStream(transport)

        assert stream.next_message() == ping("1")
        transport.payload = b"NG 2\r\n"
        assert stream.next_message() == ping("2")

    def test_bare_lf_lines(self):
        stream = IrcStream(io.BytesIO(b"PING 1\nPING 2\n"))
        assert list(stream) == [ping("1"), ping("2")]

    def test_parse_error_then_continue(self, caplog):
        caplog.set_level(logging.WARNING, logger="ircstream")
        stream = IrcStream(io.BytesIO(b"PR1VMSG x\r\nPING 2\r\n"))

        with pytest.raises(ParseError) as excinfo:
            stream.next_message()
        assert excinfo.value.raw == b"PR1VMSG x\r\n"
        assert stream.next_message() == ping("2")
        assert any("Failed to parse line: [PR1VMSG x]" in r.message for r in caplog.records)

    def test_parse_error_is_not_transport_error(self):
        stream = IrcStream(io.BytesIO(b"1234\r\n"))
        with pytest.raises(ParseError):
            stream.next_message()
        assert not issubclass(ParseError, TransportError)

    def test_invalid_utf8_still_parsed(self):
        stream = IrcStream(io.BytesIO(b":n!u@h PRIVMSG #c :\xff\xfe hi\r\n"))
        msg = stream.next_message()
        assert msg.command == PRIVMSG
        assert msg.arguments == ("#c", "\ufffd\ufffd hi")

    def test_read_error_wrapped(self):
        transport = Mock()
        transport.read.side_effect = ConnectionResetError("reset by peer")
        stream = IrcStream(transport)

        with pytest.raises(TransportError) as excinfo:
            stream.next_message()
        assert excinfo.value.eof is False
        assert isinstance(excinfo.value.__cause__, ConnectionResetError)

    def test_closed_transport_is_transport_error(self):
        transport = io.BytesIO(b"PING 1\r\n")
        stream = IrcStream(transport)
        transport.close()

        with pytest.raises(TransportError) as excinfo:
            stream.next_message()
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_partial_line_at_eof(self):
        stream = IrcStream(io.BytesIO(b"PING 1\r\nPING 2"))
        assert stream.next_message() == ping("1")
        with pytest.raises(TransportError):
            stream.next_message()


class TestLineTooLong:
    """Unbounded lines are discarded, the stream stays usable"""

    def test_overflow_then_recover(self):
        payload = b"PRIVMSG #c :" + b"x" * 2000 + b"\r\nPING 2\r\n"
        stream = IrcStream(TrickleTransport(payload, step=100), max_line_length=600)

        with pytest.raises(LineTooLongError):
            stream.next_message()
        assert stream.next_message() == ping("2")

    def test_overflow_is_parse_error(self):
        assert issubclass(LineTooLongError, ParseError)


class TestIteration:
    """Iterator view stops at the first failure"""

    def test_reader_as_iterator(self):
        stream = IrcStream(io.BytesIO(b"PING 123\r\nPING 456\r\nPING 789\r\n"))

        messages = 0
        for message in stream:
            messages += 1
            assert message.command == PING

        assert messages == 3

    def test_stops_at_parse_error(self):
        stream = IrcStream(io.BytesIO(b"PING 1\r\n1234\r\nPING 3\r\n"))
        assert list(stream) == [ping("1")]

    def test_stops_on_closed_transport(self):
        transport = io.BytesIO(b"PING 1\r\n")
        stream = IrcStream(transport)
        transport.close()
        assert list(stream) == []

    def test_not_restartable(self):
        stream = IrcStream(io.BytesIO(b"PING 1\r\n1234\r\nPING 3\r\n"))
        assert list(stream) == [ping("1")]
        assert list(stream) == []
        # The underlying stream is still readable directly.
        assert stream.next_message() == ping("3")


class TestSend:
    """Writing messages"""

    def test_send_writes_terminated_line_and_flushes(self):
        transport = Mock()
        stream = IrcStream(transport)

        stream.send(Message(None, PRIVMSG, ["#chan", "hello there"]))

        transport.write.assert_called_once_with(b"PRIVMSG #chan :hello there\r\n")
        transport.flush.assert_called_once_with()

    def test_send_order(self):
        out = io.BytesIO()
        stream = IrcStream(out)
        stream.send(ping("1"))
        stream.send(ping("2"))
        assert out.getvalue() == b"PING 1\r\nPING 2\r\n"

    def test_write_error_wrapped(self):
        transport = Mock()
        transport.write.side_effect = BrokenPipeError("gone")
        stream = IrcStream(transport)

        with pytest.raises(TransportError) as excinfo:
            stream.send(ping("1"))
        assert isinstance(excinfo.value.__cause__, BrokenPipeError)

    def test_send_on_closed_transport(self):
        out = io.BytesIO()
        stream = IrcStream(out)
        out.close()

        with pytest.raises(TransportError):
            stream.send(ping("1"))

    def test_unserializable_message_not_written(self):
        transport = Mock()
        stream = IrcStream(transport)

        with pytest.raises(SerializationError):
            stream.send(Message(None, PRIVMSG, ["two words", "x"]))
        transport.write.assert_not_called()

    def test_send_logs_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="ircstream")
        IrcStream(io.BytesIO(), peer="irc.example.net:6667").send(ping("1"))
        assert any("SEND> PING 1" in r.message for r in caplog.records)
        assert any("irc.example.net:6667" in r.message for r in caplog.records)


class TestCloneAndClose:
    """Clone and lifecycle helpers"""

    def test_try_clone_uses_transport_clone(self):
        transport = Mock()
        clone = Mock()
        transport.try_clone.return_value = clone
        stream = IrcStream(transport, read_chunk_size=10, max_line_length=1000, peer="p")

        cloned = stream.try_clone()

        assert cloned.transport is clone
        assert cloned.read_chunk_size == 10
        assert cloned.max_line_length == 1000
        assert cloned.peer == "p"

    def test_try_clone_has_empty_buffer(self):
        transport = TrickleTransport(b"PING 1\r\nPING 2\r\n", step=64)
        transport.try_clone = lambda: TrickleTransport(b"PING 9\r\n")
        stream = IrcStream(transport)
        assert stream.next_message() == ping("1")

        cloned = stream.try_clone()
        assert cloned.next_message() == ping("9")
        assert stream.next_message() == ping("2")

    def test_try_clone_unsupported(self):
        with pytest.raises(TransportError):
            IrcStream(io.BytesIO()).try_clone()

    def test_try_clone_os_error(self):
        transport = Mock()
        transport.try_clone.side_effect = OSError("too many files")
        with pytest.raises(TransportError):
            IrcStream(transport).try_clone()

    def test_context_manager_closes(self):
        transport = Mock()
        with IrcStream(transport) as stream:
            assert stream.transport is transport
        transport.close.assert_called_once_with()
