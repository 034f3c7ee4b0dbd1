"""Per-conversion state passed explicitly through every recursive call."""

from wsdl_openapi.fetch import Fetcher
from wsdl_openapi.openapi.synthesizer import ComponentRegistry


class ConversionContext:
    """Owns the document transport, the visited-location sets and the
    component registry of a single conversion run."""

    def __init__(self, fetcher: Fetcher | None = None, timeout: float = 30.0):
        self.fetcher = fetcher or Fetcher(timeout=timeout)
        self._owns_fetcher = fetcher is None
        self.visited_documents: set[str] = set()
        self.visited_schemas: set[str] = set()
        self.registry = ComponentRegistry()

    def close(self) -> None:
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self) -> "ConversionContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
