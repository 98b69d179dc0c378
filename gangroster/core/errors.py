"""
Domain errors raised by the fighter mutation handlers.

Each error carries a ``kind`` that the gateway copies into the failed
``MutationResult`` and the API maps onto an HTTP status.
"""


class ErrorKind:
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    PRECONDITION_FAILED = "precondition_failed"
    STORE_ERROR = "store_error"
    # Raised only by client transports; the gateway never produces it
    NETWORK = "network"


class MutationError(Exception):
    kind = ErrorKind.STORE_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(MutationError):
    kind = ErrorKind.NOT_FOUND


class InvalidInput(MutationError):
    kind = ErrorKind.VALIDATION


class InsufficientResource(MutationError):
    kind = ErrorKind.PRECONDITION_FAILED


class StoreError(MutationError):
    kind = ErrorKind.STORE_ERROR
