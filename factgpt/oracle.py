"""
FactGPT Oracle Verification Capability

The resolution protocol delegates signature checking to the oracle
network through this interface. A verifier is bound to exactly one
oracle endpoint, named by endpoint_id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .primitives import GroupPublicKey, RequestId, SchnorrSignature


class VerificationOutcome(str, Enum):
    """
    Verification outcomes.

    CONFIRMED: Signature is a valid group signature over the message hash
    REJECTED: Anything else; reason provided
    """
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"


@dataclass
class VerificationResult:
    """Result of asking the oracle network to verify a signature."""
    outcome: VerificationOutcome
    reason: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def is_confirmed(self) -> bool:
        return self.outcome == VerificationOutcome.CONFIRMED

    @classmethod
    def confirmed(cls) -> 'VerificationResult':
        return cls(outcome=VerificationOutcome.CONFIRMED)

    @classmethod
    def rejected(cls, reason: str, details: Dict[str, Any] = None) -> 'VerificationResult':
        return cls(outcome=VerificationOutcome.REJECTED, reason=reason, details=details)

    def to_dict(self) -> Dict[str, Any]:
        d = {"outcome": self.outcome.value}
        if self.reason:
            d["reason"] = self.reason
        if self.details:
            d["details"] = self.details
        return d


class OracleVerifier(ABC):
    """
    Abstract oracle verification capability.

    Implementations must not raise on a bad or malformed signature;
    they return a REJECTED result instead.
    """

    @property
    @abstractmethod
    def endpoint_id(self) -> str:
        """Identity of the oracle network entry point this verifier calls."""
        pass

    @abstractmethod
    def verify(
        self,
        request_id: RequestId,
        message_hash: int,
        signature: SchnorrSignature,
        group_public_key: GroupPublicKey
    ) -> VerificationResult:
        pass
