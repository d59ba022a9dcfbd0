import json
import os

import pytest

from cotlink.flow_tags.logging_models import FlowTagDebug
from cotlink.logging import (
    Entry,
    Logger,
    LoggingConfig,
    LogLevel,
    close_streams,
    get_stream,
)
from cotlink.transport.logging_models import TransportInfo, TransportWarning


@pytest.fixture(autouse=True)
async def reset_streams():
    yield
    await close_streams()


class TestLogLevel:
    def test_from_name(self):
        assert LogLevel.from_name("warn") == LogLevel.WARN
        assert LogLevel.from_name("TRACE") == LogLevel.TRACE

    def test_ranks_follow_severity(self):
        assert LogLevel.TRACE.rank < LogLevel.DEBUG.rank < LogLevel.INFO.rank
        assert LogLevel.ERROR.rank < LogLevel.FATAL.rank


class TestLoggerOutput:
    @pytest.mark.asyncio
    async def test_writes_entry_to_stderr(self, capsys):
        logger = Logger("transport")

        await logger.log(
            TransportWarning(
                message="certificate verification disabled",
                transport="tls",
                host="127.0.0.1",
                port=8089,
                client_id="client-a",
            )
        )

        captured = capsys.readouterr()
        assert "WARN - transport" in captured.err
        assert "certificate verification disabled" in captured.err
        assert "test_writes_entry_to_stderr" in captured.err

    @pytest.mark.asyncio
    async def test_filters_below_level(self, capsys):
        await Logger("flow_tags").log(
            FlowTagDebug(
                message="debug entries are hidden at info",
                client_id="client-a",
                origin="client-a",
                sequence=1,
            )
        )

        assert "debug entries are hidden" not in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_level_and_output_follow_config(self, capsys):
        LoggingConfig().update(log_level="debug", log_output="stdout")

        await Logger("flow_tags").log(
            FlowTagDebug(
                message="relayed event",
                client_id="client-a",
            )
        )

        captured = capsys.readouterr()
        assert "relayed event" in captured.out
        assert captured.err == ""

    @pytest.mark.asyncio
    async def test_disabled_logger_is_silent(self, capsys):
        config = LoggingConfig()
        config.disable("muted")

        await Logger("muted").log(
            Entry(message="never shown", level=LogLevel.ERROR),
        )

        assert "never shown" not in capsys.readouterr().err

        config.enable("muted")

        await Logger("muted").log(
            Entry(message="shown again", level=LogLevel.ERROR),
        )

        assert "shown again" in capsys.readouterr().err

    def test_loggers_share_streams_by_name(self):
        assert Logger("transport").stream is get_stream("transport")
        assert Logger("transport").stream is not Logger("flow_tags").stream


class TestLoggerFileOutput:
    @pytest.mark.asyncio
    async def test_writes_json_lines(self, tmp_path):
        LoggingConfig().update(log_directory=str(tmp_path))

        logger = Logger("transport")

        for port in (8087, 8089):
            await logger.log(
                TransportInfo(
                    message="Connected",
                    transport="tcp",
                    host="127.0.0.1",
                    port=port,
                    client_id="client-a",
                )
            )

        assert logger.stream.logfile_path == os.path.join(tmp_path, "transport.json")

        await close_streams()

        with open(os.path.join(tmp_path, "transport.json")) as logfile:
            lines = [json.loads(line) for line in logfile if line.strip()]

        assert [line["entry"]["port"] for line in lines] == [8087, 8089]
        assert lines[0]["entry"]["message"] == "Connected"
        assert lines[0]["entry"]["level"] == "INFO"
        assert lines[0]["logger"] == "transport"
        assert lines[0]["function_name"] == "test_writes_json_lines"

    @pytest.mark.asyncio
    async def test_no_file_without_directory(self, tmp_path):
        logger = Logger("transport")

        await logger.log(
            TransportWarning(
                message="stderr only",
                transport="udp",
                host="127.0.0.1",
                port=8087,
                client_id="client-a",
            )
        )

        assert logger.stream.logfile_path is None
