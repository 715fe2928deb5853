"""
Failure types for the optimization pipeline.

Adapters only know about the transport: they raise BackendUnreachable or
BackendTimedOut, or hand back whatever the backend answered. The service turns
those into an OptimizationError subclass, which carries the HTTP status and the
message shown to the caller.
"""
from typing import Dict, Optional


class OptimizationError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.message}


class ValidationError(OptimizationError):
    """Malformed or missing request fields."""
    status_code = 400


class ConnectivityError(OptimizationError):
    """Backend could not be reached."""
    status_code = 500


class BackendTimeoutError(ConnectivityError):
    status_code = 504


class ModelConfigurationError(OptimizationError):
    """Backend rejected the configured model identifier."""
    status_code = 400


class BackendError(OptimizationError):
    """Any other non-success answer from the backend."""
    status_code = 500


class ConfigurationError(OptimizationError):
    status_code = 500


# Transport-level signals raised by adapters

class BackendUnreachable(Exception):
    pass


class BackendTimedOut(Exception):
    pass
