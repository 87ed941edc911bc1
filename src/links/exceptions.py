class LinkError(Exception):
    """Base class for short link failures.

    ``error`` is the short, client-facing description; the exception message
    carries the detail that goes to the log.
    """

    error = "internal error"


class InvalidURLError(LinkError):
    error = "invalid url"


class NotFoundError(LinkError):
    error = "code not found"


class DuplicateKeyError(LinkError):
    error = "duplicate code"


class GenerationExhaustedError(LinkError):
    error = "could not allocate a unique code"


class StoreError(LinkError):
    error = "storage failure"
