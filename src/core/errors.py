"""
Exception hierarchy shared by the core, the backend client and the views.

    LabelDeskError
    ├── ConfigurationError
    ├── BackendError           (transport failure, wrapped by the core)
    ├── StorageError           (session db failure, wrapped by the core)
    ├── AuthenticationFailed
    ├── SearchFailed
    ├── PrintFailed
    │   └── PrintInProgress
    └── ValidationRejected     (never surfaced by the queue)
"""


class LabelDeskError(Exception):
    """Base class, views catch this and show the message to the operator."""


class ConfigurationError(LabelDeskError):
    pass


class BackendError(LabelDeskError):
    """Raised by the HTTP client when the request itself could not complete."""


class StorageError(LabelDeskError):
    """The local session database could not be read or written."""


class AuthenticationFailed(LabelDeskError):
    """Login rejected by the backend, or a response without a token."""


class SearchFailed(LabelDeskError):
    pass


class PrintFailed(LabelDeskError):
    pass


class PrintInProgress(PrintFailed):
    """A print job is already waiting on the printer."""


class ValidationRejected(LabelDeskError):
    """
    Quantity input that is not a positive integer.
    Only raised by strict parsing, the queue treats it as a no-op.
    """
