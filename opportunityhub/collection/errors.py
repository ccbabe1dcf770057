"""Failures raised by the collection pipeline."""


class ScrapeFailure(Exception):
    """A collector could not produce records for a source (network, timeout, selector miss)."""

    def __init__(self, message, source_name=None):
        super().__init__(message)
        self.source_name = source_name


class PersistenceFailure(Exception):
    """The store rejected a write; fatal to the collection run."""
