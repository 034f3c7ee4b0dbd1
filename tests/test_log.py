import json

import pytest
import structlog

from wsdl_openapi.log import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    yield
    configure_logging("WARNING", "console")


class TestConfigureLogging:
    def test_json_lines_go_to_stderr(self, capsys):
        configure_logging("INFO", "json")
        structlog.get_logger("test").info("Converted", paths=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        line = json.loads(captured.err.strip())
        assert line["event"] == "Converted"
        assert line["paths"] == 3
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filters_lower_levels(self, capsys):
        configure_logging("warning", "console")
        logger = structlog.get_logger("test")
        logger.info("hidden")
        logger.warning("Skipping schema", location="file:///x.xsd")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "Skipping schema" in err
        assert "location=file:///x.xsd" in err
