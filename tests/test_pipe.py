"""Tests for the zero-capacity Pipe."""

import threading
import time

import pytest

from fileheap.pipe import Pipe


def _start(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def test_write_blocks_until_read():
    """A write does not return until the reader has taken its bytes."""
    pipe = Pipe()
    returned = threading.Event()

    def writer():
        pipe.write(b"hello")
        returned.set()

    thread = _start(writer)
    assert not returned.wait(0.2)

    assert pipe.read() == b"hello"
    assert returned.wait(2)
    thread.join(2)


def test_partial_reads_keep_writer_blocked():
    pipe = Pipe()
    returned = threading.Event()

    def writer():
        pipe.write(b"abcdef")
        returned.set()

    _start(writer)
    time.sleep(0.05)

    assert pipe.read(4) == b"abcd"
    assert not returned.wait(0.1)
    assert pipe.read(4) == b"ef"
    assert returned.wait(2)


def test_read_returns_empty_after_clean_close():
    pipe = Pipe()
    pipe.close_write()
    assert pipe.read() == b""
    assert list(pipe) == []


def test_read_raises_write_close_error():
    pipe = Pipe()
    error = RuntimeError("aborted")
    pipe.close_write(error)

    with pytest.raises(RuntimeError) as exc_info:
        pipe.read()
    assert exc_info.value is error


def test_error_after_clean_close_aborts_reader():
    pipe = Pipe()
    pipe.close_write()
    pipe.close_write(RuntimeError("late abort"))

    with pytest.raises(RuntimeError, match="late abort"):
        pipe.read()


def test_blocked_write_raises_read_close_error():
    """Closing the read end unblocks a pending write with the given error."""
    pipe = Pipe()
    error = ValueError("consumer gone")
    result = {}

    def writer():
        try:
            pipe.write(b"data")
        except ValueError as e:
            result["error"] = e

    thread = _start(writer)
    time.sleep(0.05)
    pipe.close_read(error)
    thread.join(2)

    assert result["error"] is error


def test_write_after_read_close_defaults_to_broken_pipe():
    pipe = Pipe()
    pipe.close_read()

    with pytest.raises(BrokenPipeError):
        pipe.write(b"data")


def test_write_after_write_close_raises_value_error():
    pipe = Pipe()
    pipe.close_write()

    with pytest.raises(ValueError):
        pipe.write(b"data")
    assert pipe.write_closed


def test_empty_write_returns_immediately():
    pipe = Pipe()
    assert pipe.write(b"") == 0


def test_iteration_yields_writes_in_order():
    pipe = Pipe()
    chunks = [b"one", b"two", b"three"]

    def writer():
        for chunk in chunks:
            pipe.write(chunk)
        pipe.close_write()

    _start(writer)
    assert list(pipe) == chunks
