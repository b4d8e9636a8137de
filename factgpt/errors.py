"""
FactGPT Resolution Errors

Every failure of the resolution protocol surfaces as one of these
exceptions. None is retried internally; a failed call has no effect.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .oracle import VerificationResult


class ResolutionError(Exception):
    """Base class for resolution protocol failures."""
    code = "RESOLUTION_ERROR"

    def __init__(self, message: str, instance_id: Optional[str] = None):
        self.instance_id = instance_id
        super().__init__(message)


class AlreadyInitialized(ResolutionError):
    """Setup attempted against an instance whose records already exist."""
    code = "ALREADY_INITIALIZED"


class NotInitialized(ResolutionError):
    """Commit attempted against an instance that was never set up."""
    code = "NOT_INITIALIZED"


class DeadlineExpired(ResolutionError):
    """Commit attempted at or after the resolution deadline."""
    code = "DEADLINE_EXPIRED"

    def __init__(self, deadline: int, now: float, instance_id: Optional[str] = None):
        self.deadline = deadline
        self.now = now
        super().__init__(
            f"Resolution window closed at {deadline} (now {int(now)})",
            instance_id=instance_id,
        )


class AlreadyResolved(ResolutionError):
    """Commit attempted against an instance that already holds an outcome."""
    code = "ALREADY_RESOLVED"


class SignatureRejected(ResolutionError):
    """The oracle capability declined to confirm the signature."""
    code = "SIGNATURE_REJECTED"

    def __init__(self, result: 'VerificationResult', instance_id: Optional[str] = None):
        self.result = result
        self.reason = result.reason
        super().__init__(
            f"Oracle rejected signature: {result.reason or 'unknown'}",
            instance_id=instance_id,
        )


class UnauthorizedOracleEndpoint(ResolutionError):
    """Verification would be routed to an endpoint other than the bound one."""
    code = "UNAUTHORIZED_ORACLE_ENDPOINT"

    def __init__(self, bound: str, offered: str, instance_id: Optional[str] = None):
        self.bound = bound
        self.offered = offered
        super().__init__(
            f"Oracle endpoint {offered!r} does not match bound endpoint {bound!r}",
            instance_id=instance_id,
        )


class InvalidParameter(ResolutionError, ValueError):
    """A setup or commit parameter failed validation."""
    code = "INVALID_PARAMETER"
