"""k6report-specific exceptions."""


class K6ReportError(Exception):
    """Base class for all k6report errors."""


class SourceUnavailableError(K6ReportError):
    """Raised when the k6 results log cannot be opened.

    The CLI prints the message and exits non-zero; no partial report is
    produced.
    """


class AggregatorFinalizedError(K6ReportError):
    """Raised when an Aggregator is fed or finalized after it has finalized."""


class ConfigError(K6ReportError):
    """Raised when a k6report config file holds a value of the wrong shape."""
