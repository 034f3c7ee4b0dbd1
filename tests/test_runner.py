import json
from unittest.mock import MagicMock, patch

import pytest

from conftest import FIXTURES
from wsdl_openapi.errors import ConfigError
from wsdl_openapi.runner import STATE_FILE, BatchRunner, content_hash, load_locations, output_stem, run_batch

LIST_SERVICE = str(FIXTURES / "list_service.wsdl")
GUIDE = str(FIXTURES / "guide" / "Guide.wsdl")
GENERATOR = "kiota generate -l python -d {document} -o {output}"


def completed(returncode: int = 0, stderr: str = "") -> MagicMock:
    return MagicMock(returncode=returncode, stdout="", stderr=stderr)


class TestOutputStem:
    @pytest.mark.parametrize("location,expected", [
        ("http://host/Guide/wsdl", "Guide"),
        ("http://host/Guide.svc?wsdl", "Guide"),
        ("https://host/", "schema"),
        ("file:///srv/wsdl/Common.wsdl", "Common"),
        ("services/Dvr.wsdl", "Dvr"),
    ])
    def test_output_stem(self, location, expected):
        assert output_stem(location) == expected


class TestLoadLocations:
    def test_json_list(self, tmp_path):
        path = tmp_path / "wsdls.json"
        path.write_text('["http://host/Guide/wsdl", "local.wsdl"]')
        assert load_locations(path) == ["http://host/Guide/wsdl", "local.wsdl"]

    def test_yaml_list(self, tmp_path):
        path = tmp_path / "wsdls.yaml"
        path.write_text("- a.wsdl\n- b.wsdl\n")
        assert load_locations(path) == ["a.wsdl", "b.wsdl"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "wsdls.json"
        path.write_text("")
        assert load_locations(path) == []

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "wsdls.json"
        path.write_text('{"a": 1}')
        with pytest.raises(ConfigError):
            load_locations(path)


class TestBatchRunnerWithoutGenerator:
    def test_writes_document_and_state(self, tmp_path):
        results = BatchRunner(tmp_path).run([LIST_SERVICE])

        output = tmp_path / "list_service.openapi.json"
        assert results[0].output == output
        assert results[0].error is None
        assert json.loads(output.read_text())["openapi"] == "3.0.1"

        state = json.loads((tmp_path / STATE_FILE).read_text())
        assert state == {str(output): content_hash(output.read_text())}

    def test_failure_does_not_stop_batch(self, tmp_path):
        results = BatchRunner(tmp_path).run([str(tmp_path / "missing.wsdl"), LIST_SERVICE])
        assert results[0].error is not None
        assert results[0].output is None
        assert results[1].error is None
        assert (tmp_path / "list_service.openapi.json").exists()


class TestBatchRunnerWithGenerator:
    @patch("wsdl_openapi.runner.subprocess.run")
    def test_generator_invoked_with_paths(self, mock_run, tmp_path):
        mock_run.return_value = completed()
        results = BatchRunner(tmp_path, generator_command=GENERATOR).run([LIST_SERVICE])

        assert results[0].generated is True
        mock_run.assert_called_once_with(
            [
                "kiota", "generate", "-l", "python",
                "-d", str(tmp_path / "list_service.openapi.json"),
                "-o", str(tmp_path / "list_service_client"),
            ],
            capture_output=True,
            text=True,
        )

    @patch("wsdl_openapi.runner.subprocess.run")
    def test_unchanged_document_with_client_skipped(self, mock_run, tmp_path):
        mock_run.return_value = completed()
        runner = BatchRunner(tmp_path, generator_command=GENERATOR)
        runner.run([LIST_SERVICE])
        (tmp_path / "list_service_client").mkdir()

        results = runner.run([LIST_SERVICE])
        assert results[0].skipped is True
        assert results[0].generated is False
        assert mock_run.call_count == 1

    @patch("wsdl_openapi.runner.subprocess.run")
    def test_missing_client_dir_regenerates(self, mock_run, tmp_path):
        mock_run.return_value = completed()
        runner = BatchRunner(tmp_path, generator_command=GENERATOR)
        runner.run([LIST_SERVICE])
        runner.run([LIST_SERVICE])
        assert mock_run.call_count == 2

    @patch("wsdl_openapi.runner.subprocess.run")
    def test_changed_document_regenerates(self, mock_run, tmp_path):
        mock_run.return_value = completed()
        (tmp_path / "list_service_client").mkdir()
        output = tmp_path / "list_service.openapi.json"
        (tmp_path / STATE_FILE).write_text(json.dumps({str(output): "stale"}))

        results = BatchRunner(tmp_path, generator_command=GENERATOR).run([LIST_SERVICE])
        assert results[0].generated is True
        state = json.loads((tmp_path / STATE_FILE).read_text())
        assert state[str(output)] == content_hash(output.read_text())

    @patch("wsdl_openapi.runner.subprocess.run")
    def test_generator_failure_keeps_old_state(self, mock_run, tmp_path):
        mock_run.return_value = completed(returncode=1, stderr="boom")
        results = BatchRunner(tmp_path, generator_command=GENERATOR).run([LIST_SERVICE])

        assert results[0].error == "Generator exited with 1: boom"
        assert results[0].generated is False
        assert json.loads((tmp_path / STATE_FILE).read_text()) == {}

    @patch("wsdl_openapi.runner.subprocess.run")
    def test_state_saved_after_each_client(self, mock_run, tmp_path):
        def interrupt_second_run(args, **kwargs):
            if mock_run.call_count == 2:
                raise KeyboardInterrupt
            return completed()

        mock_run.side_effect = interrupt_second_run
        with pytest.raises(KeyboardInterrupt):
            BatchRunner(tmp_path, generator_command=GENERATOR).run([LIST_SERVICE, GUIDE])

        output = tmp_path / "list_service.openapi.json"
        state = json.loads((tmp_path / STATE_FILE).read_text())
        assert state == {str(output): content_hash(output.read_text())}

    @patch("wsdl_openapi.runner.subprocess.run", side_effect=FileNotFoundError("kiota"))
    def test_generator_not_installed(self, mock_run, tmp_path):
        results = BatchRunner(tmp_path, generator_command=GENERATOR).run([LIST_SERVICE])
        assert results[0].error.startswith("Cannot run kiota")

    def test_unreadable_state_ignored(self, tmp_path):
        (tmp_path / STATE_FILE).write_text("{not json")
        results = BatchRunner(tmp_path).run([LIST_SERVICE])
        assert results[0].error is None
        assert len(json.loads((tmp_path / STATE_FILE).read_text())) == 1


class TestRunBatch:
    def test_run_batch(self, tmp_path):
        results = run_batch([LIST_SERVICE], tmp_path / "out")
        assert [r.output.name for r in results] == ["list_service.openapi.json"]
        assert (tmp_path / "out" / STATE_FILE).exists()
