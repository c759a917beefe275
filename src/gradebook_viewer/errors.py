class GradebookError(Exception):
    """Base class for failures while loading a gradebook export."""


class FetchError(GradebookError):
    """The export could not be retrieved (missing file, HTTP error, network failure)."""


class ParseError(GradebookError):
    """The export text could not be parsed as a CSV table."""
