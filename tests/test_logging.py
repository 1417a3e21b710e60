import json
import logging

import pytest

from alumni_portal.core.logging import CustomJsonFormatter, LoggerFactory, log_function_call


def make_record(**extra):
    record = logging.LogRecord("alumni_portal.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:

    def test_includes_extra_fields(self):
        formatter = CustomJsonFormatter(extra_fields=["session_id", "viewer_id"])
        payload = json.loads(formatter.format(make_record(session_id="s1", request_id="r1")))

        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["session_id"] == "s1"
        assert payload["request_id"] == "r1"
        assert "viewer_id" not in payload


class TestLoggerFactory:

    def test_file_handlers_only_with_log_dir(self, tmp_path):
        console_only = LoggerFactory.create_logger("alumni_portal.test.console", level="DEBUG")
        assert len(console_only.handlers) == 1

        with_files = LoggerFactory.create_logger("alumni_portal.test.files", log_dir=str(tmp_path))
        assert len(with_files.handlers) == 4
        assert (tmp_path / "app.log").exists()
        for handler in with_files.handlers:
            handler.close()


class TestLogFunctionCall:

    @pytest.mark.asyncio
    async def test_async_errors_are_logged_and_raised(self, caplog):
        log = logging.getLogger("alumni_portal.test.calls")

        @log_function_call(log)
        async def explode():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="alumni_portal.test.calls"):
            with pytest.raises(RuntimeError):
                await explode()
        assert "Error in function: explode" in caplog.text

    def test_sync_result_is_returned(self):
        @log_function_call(logging.getLogger("alumni_portal.test.calls"))
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
