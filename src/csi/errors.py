"""Error handling utilities for the CSI servicers."""

import logging
from functools import wraps

import grpc

from src.storage.backends.base import BackendError

logger = logging.getLogger(__name__)


class CSIError(Exception):
    """Base class for errors carrying a gRPC status code."""
    code = grpc.StatusCode.INTERNAL

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class InvalidArgument(CSIError):
    code = grpc.StatusCode.INVALID_ARGUMENT


class NotFound(CSIError):
    code = grpc.StatusCode.NOT_FOUND


class FailedPrecondition(CSIError):
    code = grpc.StatusCode.FAILED_PRECONDITION


class AlreadyExists(CSIError):
    """Name reused with incompatible attributes."""
    code = grpc.StatusCode.ALREADY_EXISTS


class Aborted(CSIError):
    code = grpc.StatusCode.ABORTED


class Internal(CSIError):
    code = grpc.StatusCode.INTERNAL


class Unimplemented(CSIError):
    code = grpc.StatusCode.UNIMPLEMENTED


def status_for(error: Exception):
    """Map an exception to the (code, details) pair reported to the caller."""
    if isinstance(error, CSIError):
        return error.code, error.message
    if isinstance(error, BackendError):
        code = grpc.StatusCode.NOT_FOUND if error.not_found else grpc.StatusCode.UNKNOWN
        return code, error.message
    return grpc.StatusCode.INTERNAL, str(error)


def handle_csi_errors(response_cls):
    """Decorator to report servicer errors through the gRPC context.

    Args:
        response_cls: Response message type returned (empty) on failure
    """
    def decorator(f):
        @wraps(f)
        def wrapped(self, request, context):
            try:
                return f(self, request, context)
            except (CSIError, BackendError) as e:
                code, details = status_for(e)
                logger.error(f"{f.__name__} failed with {code.name}: {details}")
            except Exception as e:
                code, details = status_for(e)
                logger.exception(f"Unexpected error in {f.__name__}: {str(e)}")
            context.set_code(code)
            context.set_details(details)
            return response_cls()
        return wrapped
    return decorator
