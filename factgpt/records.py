"""
FactGPT Question Records

The two durable records of a question instance:
- QuestionRegistry: owner, prompt, deadline and the committed outcome
- OracleBinding: the oracle application and the trusted verification endpoint

Both are created once by initialize. Only the resolution fields of the
registry change afterwards, and only once.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from .primitives import OracleAppInfo


class Outcome(str, Enum):
    """
    Tri-state resolution of a question.

    UNRESOLVED is distinct from FALSE: a question that was never answered
    is not a question answered "no".
    """
    UNRESOLVED = "UNRESOLVED"
    TRUE = "TRUE"
    FALSE = "FALSE"

    @classmethod
    def from_bool(cls, value: bool) -> 'Outcome':
        return cls.TRUE if value else cls.FALSE


class QuestionState(str, Enum):
    """
    Lifecycle of a question instance.

    UNINITIALIZED: No records exist
    OPEN: Deadline in the future, no outcome committed
    RESOLVED: Outcome committed (terminal)
    EXPIRED: Deadline passed with no outcome (terminal)
    """
    UNINITIALIZED = "UNINITIALIZED"
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class QuestionRegistry:
    owner: str
    prompt: str
    deadline: int
    resolution: Outcome = Outcome.UNRESOLVED
    resolved_at: Optional[int] = None
    resolved_request_id: Optional[str] = None

    @property
    def outcome(self) -> bool:
        """Boolean view of the outcome; False until resolved."""
        return self.resolution == Outcome.TRUE

    @property
    def resolved(self) -> bool:
        return self.resolution != Outcome.UNRESOLVED

    def state_at(self, now: float) -> QuestionState:
        if self.resolved:
            return QuestionState.RESOLVED
        if now >= self.deadline:
            return QuestionState.EXPIRED
        return QuestionState.OPEN

    def with_outcome(self, outcome: bool, resolved_at: int, request_id: str) -> 'QuestionRegistry':
        return replace(
            self,
            resolution=Outcome.from_bool(outcome),
            resolved_at=resolved_at,
            resolved_request_id=request_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "prompt": self.prompt,
            "deadline": self.deadline,
            "resolution": self.resolution.value,
            "resolved_at": self.resolved_at,
            "resolved_request_id": self.resolved_request_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QuestionRegistry':
        return cls(
            owner=data["owner"],
            prompt=data["prompt"],
            deadline=int(data["deadline"]),
            resolution=Outcome(data.get("resolution", Outcome.UNRESOLVED.value)),
            resolved_at=data.get("resolved_at"),
            resolved_request_id=data.get("resolved_request_id"),
        )


@dataclass(frozen=True)
class OracleBinding:
    """Oracle application and the only endpoint allowed to verify for it."""
    app_info: OracleAppInfo
    oracle_program_identity: str

    @property
    def app_id(self) -> int:
        return self.app_info.app_id

    @property
    def group_public_key(self):
        return self.app_info.group_public_key

    def to_dict(self) -> Dict[str, Any]:
        return {
            "app_info": self.app_info.to_dict(),
            "oracle_program_identity": self.oracle_program_identity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OracleBinding':
        return cls(
            app_info=OracleAppInfo.from_dict(data["app_info"]),
            oracle_program_identity=data["oracle_program_identity"],
        )
