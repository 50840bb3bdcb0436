"""
Test module for chainlog.infrastructure.logging.sinks
"""

import io
import json
from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from chainlog.config.settings import LogFormat, LoggingSettings
from chainlog.core.levels import Severity
from chainlog.exceptions import InvalidStreamConfig
from chainlog.infrastructure.logging.sinks import (
    FanoutSink,
    MemorySink,
    Sink,
    StreamSink,
    StructlogSink,
    build_sink,
)


def sample_fields(**extra):
    fields = {
        "name": "storage",
        "time": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    }
    fields.update(extra)
    return fields


class TestStreamSink:
    """Test cases for StreamSink rendering."""

    def test_json_line(self, settings):
        stream = io.StringIO()
        sink = StreamSink(stream, settings)

        sink.emit(Severity.WARN, sample_fields(req_id="A:B", bucket="b1"), "object stored")

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["message"] == "object stored"
        assert entry["level"] == "warn"
        assert entry["name"] == "storage"
        assert entry["req_id"] == "A:B"
        assert entry["bucket"] == "b1"
        assert entry["time"] == "2024-01-02T03:04:05+00:00"

    def test_reserved_field_names(self, settings):
        stream = io.StringIO()
        sink = StreamSink(stream, settings)

        sink.emit(Severity.INFO, sample_fields(event="login"), "user event")

        entry = json.loads(stream.getvalue())
        assert entry["message"] == "user event"
        assert entry["event_field"] == "login"

    def test_level_and_message_fields_survive(self, settings):
        stream = io.StringIO()
        sink = StreamSink(stream, settings)

        sink.emit(Severity.INFO, sample_fields(message="field value", level="L3"), "text")

        entry = json.loads(stream.getvalue())
        assert entry["message"] == "text"
        assert entry["level"] == "info"
        assert entry["message_field"] == "field value"
        assert entry["level_field"] == "L3"

    def test_one_line_per_entry(self, settings):
        stream = io.StringIO()
        sink = StreamSink(stream, settings)

        sink.emit(Severity.INFO, sample_fields(), "one")
        sink.emit(Severity.INFO, sample_fields(), "two")

        messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
        assert messages == ["one", "two"]

    def test_console_format(self):
        settings = LoggingSettings(_env_file=None, format=LogFormat.CONSOLE)
        stream = io.StringIO()
        sink = StreamSink(stream, settings)

        sink.emit(Severity.INFO, sample_fields(), "readable")

        assert "readable" in stream.getvalue()

    def test_is_a_sink(self, settings):
        assert isinstance(StreamSink(io.StringIO(), settings), Sink)


class TestStructlogSink:
    """Test cases for forwarding to the global structlog pipeline."""

    @pytest.mark.parametrize("severity,method", [
        (Severity.TRACE, "debug"),
        (Severity.DEBUG, "debug"),
        (Severity.INFO, "info"),
        (Severity.WARN, "warning"),
        (Severity.ERROR, "error"),
        (Severity.FATAL, "critical"),
    ])
    def test_method_mapping(self, severity, method):
        mock_logger = Mock()
        with patch('chainlog.infrastructure.logging.sinks.get_logger', return_value=mock_logger):
            sink = StructlogSink("storage")

        sink.emit(severity, {"name": "storage"}, "message")

        getattr(mock_logger, method).assert_called_once_with(
            "message", name="storage", level=severity.value
        )


class TestFanoutSink:
    """Test cases for FanoutSink."""

    def test_writes_to_every_sink_in_order(self):
        calls = []
        first, second = Mock(), Mock()
        first.emit.side_effect = lambda *args: calls.append("first")
        second.emit.side_effect = lambda *args: calls.append("second")

        FanoutSink([first, second]).emit(Severity.INFO, {}, "message")

        assert calls == ["first", "second"]

    def test_failing_destination_does_not_stop_the_rest(self):
        failing = Mock()
        failing.emit.side_effect = RuntimeError("disk full")
        memory = MemorySink()

        FanoutSink([failing, memory]).emit(Severity.ERROR, {}, "message")

        failing.emit.assert_called_once()
        assert memory.entries == [(Severity.ERROR, {}, "message")]


class TestMemorySink:
    """Test cases for MemorySink."""

    def test_records_copies(self):
        sink = MemorySink()
        fields = {"a": 1}

        sink.emit(Severity.INFO, fields, "message")
        fields["a"] = 2

        assert sink.entries == [(Severity.INFO, {"a": 1}, "message")]
        assert sink.severities() == [Severity.INFO]

        sink.clear()
        assert sink.entries == []


class TestBuildSink:
    """Test cases for the streams option."""

    def test_default_is_stdout(self, settings):
        import sys

        sink = build_sink(None, settings)

        assert isinstance(sink, StreamSink)
        assert sink.stream is sys.stdout

    def test_single_sink_used_as_is(self, settings):
        memory = MemorySink()

        assert build_sink([memory], settings) is memory

    def test_stream_wrapped(self, settings):
        stream = io.StringIO()

        sink = build_sink((stream,), settings)

        assert isinstance(sink, StreamSink)
        assert sink.stream is stream

    def test_several_destinations(self, settings):
        sink = build_sink([MemorySink(), io.StringIO()], settings)

        assert isinstance(sink, FanoutSink)
        assert isinstance(sink.sinks[1], StreamSink)

    @pytest.mark.parametrize("streams", [io.StringIO(), {"a": 1}, "stdout", 1])
    def test_not_a_sequence(self, settings, streams):
        with pytest.raises(InvalidStreamConfig):
            build_sink(streams, settings)

    def test_empty(self, settings):
        with pytest.raises(InvalidStreamConfig):
            build_sink([], settings)

    def test_unsupported_destination(self, settings):
        with pytest.raises(InvalidStreamConfig) as exc_info:
            build_sink([object()], settings)

        assert "destination" in exc_info.value.details
