"""Batch conversion of several WSDL locations.

For every location the OpenAPI document is written to
``<out_dir>/<stem>.openapi.json`` and its MD5 is compared to the value stored
in ``<out_dir>/generator-state.json``. An external client generator, if
configured, only runs when the document changed or its client directory is
missing; the stored hash is updated only after the generator succeeds.
"""

import hashlib
import json
import shlex
import subprocess
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

import structlog
import yaml
from pydantic import BaseModel

from wsdl_openapi.config import Settings
from wsdl_openapi.converter import WsdlConverter
from wsdl_openapi.errors import ConfigError, ConversionError

logger = structlog.get_logger(__name__)

STATE_FILE = "generator-state.json"


class BatchResult(BaseModel):
    """Outcome of converting one location."""

    location: str
    output: Path | None = None
    content_hash: str | None = None
    generated: bool = False
    skipped: bool = False
    error: str | None = None


def load_locations(file_path: Path) -> list[str]:
    """Read a JSON or YAML list of WSDL locations."""
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read location list {file_path}: {e}") from e

    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ConfigError(f"{file_path} must contain a list of strings")
    return data


def output_stem(location: str) -> str:
    """Name for the output file of ``location``.

    HTTP(S): the first path segment up to its first dot (``/Guide/wsdl`` ->
    ``Guide``). Files: the file name without extension.
    """
    parts = urlsplit(location)
    if parts.scheme in ("http", "https"):
        segments = [s for s in parts.path.split("/") if s]
        stem = segments[0].split(".")[0] if segments else ""
    elif parts.scheme == "file":
        stem = Path(url2pathname(parts.path)).stem
    else:
        stem = Path(location).stem
    return stem or "schema"


def content_hash(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class BatchRunner:
    """Converts a list of locations into an output directory."""

    def __init__(
        self,
        out_dir: Path,
        settings: Settings | None = None,
        generator_command: str | None = None,
        converter: WsdlConverter | None = None,
    ):
        self.out_dir = out_dir
        self.settings = settings or Settings()
        self.generator_command = generator_command
        self.converter = converter or WsdlConverter(self.settings)
        self.state_file = out_dir / STATE_FILE

    def run(self, locations: list[str]) -> list[BatchResult]:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        state = self._load_state()
        results = [self._process(location, state) for location in locations]
        self._save_state(state)
        return results

    def _process(self, location: str, state: dict[str, str]) -> BatchResult:
        stem = output_stem(location)
        output = self.out_dir / f"{stem}.openapi.json"
        try:
            text = self.converter.generate(location, "json")
            output.write_text(text, encoding="utf-8")
        except (ConversionError, OSError) as e:
            logger.error("Conversion failed", location=location, error=str(e))
            return BatchResult(location=location, error=str(e))

        digest = content_hash(text)
        result = BatchResult(location=location, output=output, content_hash=digest)

        if self.generator_command is None:
            self._record(state, output, digest)
            return result

        client_dir = self.out_dir / f"{stem}_client"
        if state.get(str(output)) == digest and client_dir.is_dir():
            logger.info("Skipping client generation, no changes", output=str(output))
            result.skipped = True
            return result

        error = self._run_generator(output, client_dir)
        if error is None:
            self._record(state, output, digest)
            result.generated = True
        else:
            result.error = error
        return result

    def _run_generator(self, document: Path, client_dir: Path) -> str | None:
        """Run the generator command. Returns an error message on failure."""
        args = [
            token.format(document=str(document), output=str(client_dir))
            for token in shlex.split(self.generator_command)
        ]
        logger.info("Running client generator", command=args[0], document=str(document), output=str(client_dir))
        try:
            result = subprocess.run(args, capture_output=True, text=True)
        except OSError as e:
            return f"Cannot run {args[0]}: {e}"

        if result.returncode != 0:
            logger.error("Client generator failed", returncode=result.returncode, stderr=result.stderr[:500])
            return f"Generator exited with {result.returncode}: {result.stderr.strip()[:500]}"
        return None

    def _load_state(self) -> dict[str, str]:
        if not self.state_file.exists():
            return {}
        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable state file", path=str(self.state_file), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _record(self, state: dict[str, str], output: Path, digest: str) -> None:
        """Store the hash of a finished document and persist the state at once."""
        state[str(output)] = digest
        self._save_state(state)

    def _save_state(self, state: dict[str, str]) -> None:
        self.state_file.write_text(json.dumps(state, indent=2), encoding="utf-8")


def run_batch(
    locations: list[str],
    out_dir: Path,
    settings: Settings | None = None,
    generator_command: str | None = None,
) -> list[BatchResult]:
    """Shortcut for ``BatchRunner(out_dir, settings, generator_command).run(locations)``."""
    return BatchRunner(out_dir, settings=settings, generator_command=generator_command).run(locations)
