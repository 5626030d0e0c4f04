import io

from client.logger import LoggingAdapter, QueryLogger, StdOutLogger


class TestLoggers:

    def test_stdout_logger_writes_every_level(self):
        out = io.StringIO()
        logger = StdOutLogger(stream=out)
        for level in ("fatal", "error", "warn", "info", "debug"):
            getattr(logger, level)(f"{level} message")

        assert out.getvalue().splitlines() == [
            "fatal message", "error message", "warn message", "info message", "debug message",
        ]

    def test_stdout_loggers_do_not_share_handlers(self):
        first, second = io.StringIO(), io.StringIO()
        StdOutLogger(stream=first).info("one")
        StdOutLogger(stream=second).info("two")
        assert first.getvalue() == "one\n"
        assert second.getvalue() == "two\n"

    def test_loggers_satisfy_protocol(self):
        assert isinstance(StdOutLogger(stream=io.StringIO()), QueryLogger)
        assert isinstance(LoggingAdapter(None), QueryLogger)
