"""
FactGPT Resolution Protocol

Commits the oracle-attested answer to a yes/no question exactly once,
before the question's deadline.

    initialize      creates the QuestionRegistry and OracleBinding
    commit_outcome  verifies an oracle signature over the outcome and
                    writes it into the registry

Lifecycle:
    UNINITIALIZED --initialize--> OPEN --commit_outcome--> RESOLVED
                                  OPEN --deadline passes--> EXPIRED

RESOLVED and EXPIRED are terminal. The verification capability is fixed
at construction; no call accepts an alternative oracle endpoint.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from . import config
from .errors import (
    AlreadyInitialized,
    AlreadyResolved,
    DeadlineExpired,
    InvalidParameter,
    NotInitialized,
    ResolutionError,
    SignatureRejected,
    UnauthorizedOracleEndpoint,
)
from .hashing import hash_to_hex, message_hash as compute_message_hash
from .logging_config import AuditLogger, audit_log, request_id_var
from .oracle import OracleVerifier, VerificationResult
from .primitives import OracleAppInfo, RequestId, SchnorrSignature
from .records import OracleBinding, QuestionRegistry, QuestionState
from .store import DEFAULT_INSTANCE_ID, InMemoryStateStore, SQLiteStateStore, StateStore

logger = logging.getLogger(__name__)

U64_MAX = 2 ** 64 - 1


@dataclass
class CommitReceipt:
    """Record of a successful commit."""
    instance_id: str
    outcome: bool
    request_id: str
    message_hash: int
    resolved_at: int
    verification: VerificationResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "outcome": self.outcome,
            "request_id": self.request_id,
            "message_hash": hash_to_hex(self.message_hash),
            "resolved_at": self.resolved_at,
            "verification": self.verification.to_dict(),
        }


class ResolutionProtocol:
    """
    Oracle-attested outcome resolution.

    Usage:
        protocol = ResolutionProtocol(verifier=Ed25519OracleVerifier())
        protocol.initialize(
            owner="alice",
            prompt="Did X happen?",
            deadline=int(time.time()) + 3600,
            oracle_app_info=group.app_info(app_id=42),
            oracle_program_identity=verifier.endpoint_id,
        )

        h = protocol.message_hash(True, request_id)
        receipt = protocol.commit_outcome(True, request_id, group.sign(request_id, h))
    """

    def __init__(
        self,
        verifier: OracleVerifier,
        store: Optional[StateStore] = None,
        clock: Optional[Callable[[], float]] = None,
        audit: Optional[AuditLogger] = None,
        prompt_max_bytes: Optional[int] = None
    ):
        self._verifier = verifier
        self.store = store or InMemoryStateStore()
        self.clock = clock or time.time
        self.audit = audit or audit_log
        self.prompt_max_bytes = prompt_max_bytes if prompt_max_bytes is not None else config.PROMPT_MAX_BYTES

    @classmethod
    def from_config(cls, verifier: OracleVerifier) -> 'ResolutionProtocol':
        """Build a protocol persisting to FACTGPT_DB_PATH."""
        return cls(verifier=verifier, store=SQLiteStateStore(config.DB_PATH))

    @property
    def verifier(self) -> OracleVerifier:
        return self._verifier

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(
        self,
        owner: str,
        prompt: str,
        deadline: int,
        oracle_app_info: OracleAppInfo,
        oracle_program_identity: str,
        instance_id: str = DEFAULT_INSTANCE_ID
    ) -> Tuple[QuestionRegistry, OracleBinding]:
        """
        Create the registry and oracle binding of a question instance.

        Raises:
            InvalidParameter: A parameter failed validation
            AlreadyInitialized: The instance's records already exist
        """
        try:
            self._validate_setup(owner, prompt, deadline, oracle_app_info, oracle_program_identity)
        except InvalidParameter as exc:
            self.audit.initialize_rejected(instance_id, str(exc))
            raise

        registry = QuestionRegistry(owner=owner, prompt=prompt, deadline=deadline)
        binding = OracleBinding(
            app_info=oracle_app_info,
            oracle_program_identity=oracle_program_identity,
        )

        if not self.store.create(instance_id, registry, binding):
            self.audit.initialize_rejected(instance_id, AlreadyInitialized.code)
            raise AlreadyInitialized(
                f"Question instance {instance_id!r} is already initialized",
                instance_id=instance_id,
            )

        self.audit.question_initialized(
            instance_id=instance_id,
            owner=owner,
            deadline=deadline,
            app_id=oracle_app_info.app_id,
            oracle_endpoint=oracle_program_identity,
        )
        return registry, binding

    def _validate_setup(
        self,
        owner: str,
        prompt: str,
        deadline: int,
        oracle_app_info: OracleAppInfo,
        oracle_program_identity: str
    ) -> None:
        if not isinstance(owner, str) or not owner:
            raise InvalidParameter("owner must be a non-empty string")
        if not isinstance(prompt, str):
            raise InvalidParameter("prompt must be a string")
        if len(prompt.encode('utf-8')) > self.prompt_max_bytes:
            raise InvalidParameter(
                f"prompt exceeds {self.prompt_max_bytes} bytes when UTF-8 encoded"
            )
        if isinstance(deadline, bool) or not isinstance(deadline, int):
            raise InvalidParameter("deadline must be an integer timestamp")
        if not 0 <= deadline <= U64_MAX:
            raise InvalidParameter("deadline must be an unsigned 64-bit timestamp")
        if not isinstance(oracle_app_info, OracleAppInfo):
            raise InvalidParameter("oracle_app_info must be an OracleAppInfo")
        if not isinstance(oracle_program_identity, str) or not oracle_program_identity:
            raise InvalidParameter("oracle_program_identity must be a non-empty string")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_registry(self, instance_id: str = DEFAULT_INSTANCE_ID) -> Optional[QuestionRegistry]:
        return self.store.get_registry(instance_id)

    def get_binding(self, instance_id: str = DEFAULT_INSTANCE_ID) -> Optional[OracleBinding]:
        return self.store.get_binding(instance_id)

    def state(self, instance_id: str = DEFAULT_INSTANCE_ID) -> QuestionState:
        registry = self.store.get_registry(instance_id)
        if registry is None:
            return QuestionState.UNINITIALIZED
        return registry.state_at(self.clock())

    def message_hash(
        self,
        outcome: bool,
        request_id: Union[RequestId, bytes],
        instance_id: str = DEFAULT_INSTANCE_ID
    ) -> int:
        """The hash the oracle group must sign to attest this outcome."""
        binding = self.store.get_binding(instance_id)
        if binding is None:
            raise NotInitialized(
                f"Question instance {instance_id!r} is not initialized",
                instance_id=instance_id,
            )
        return compute_message_hash(binding.app_id, _as_request_id(request_id), outcome)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def commit_outcome(
        self,
        outcome: bool,
        request_id: Union[RequestId, bytes],
        signature: SchnorrSignature,
        instance_id: str = DEFAULT_INSTANCE_ID
    ) -> CommitReceipt:
        """
        Commit an oracle-attested outcome.

        Checks run in order and the first failure aborts with no state change:
        deadline, prior resolution, oracle endpoint, signature.

        Raises:
            InvalidParameter, NotInitialized, DeadlineExpired, AlreadyResolved,
            UnauthorizedOracleEndpoint, SignatureRejected
        """
        if not isinstance(outcome, bool):
            raise InvalidParameter("outcome must be a bool", instance_id=instance_id)
        if not isinstance(signature, SchnorrSignature):
            raise InvalidParameter("signature must be a SchnorrSignature", instance_id=instance_id)
        request_id = _as_request_id(request_id)

        token = request_id_var.set(request_id.hex())
        try:
            self.audit.commit_requested(instance_id, outcome)
            try:
                return self._commit(outcome, request_id, signature, instance_id)
            except ResolutionError as exc:
                self.audit.commit_rejected(instance_id, exc.code, str(exc))
                raise
        finally:
            request_id_var.reset(token)

    def _commit(
        self,
        outcome: bool,
        request_id: RequestId,
        signature: SchnorrSignature,
        instance_id: str
    ) -> CommitReceipt:
        registry = self.store.get_registry(instance_id)
        binding = self.store.get_binding(instance_id)
        if registry is None or binding is None:
            raise NotInitialized(
                f"Question instance {instance_id!r} is not initialized",
                instance_id=instance_id,
            )

        now = self.clock()
        if now >= registry.deadline:
            raise DeadlineExpired(registry.deadline, now, instance_id=instance_id)

        if registry.resolved:
            raise AlreadyResolved(
                f"Question instance {instance_id!r} is already resolved",
                instance_id=instance_id,
            )

        if self._verifier.endpoint_id != binding.oracle_program_identity:
            self.audit.security_event(
                "oracle_endpoint_mismatch",
                severity="high",
                instance_id=instance_id,
                bound_endpoint=binding.oracle_program_identity,
                offered_endpoint=self._verifier.endpoint_id,
            )
            raise UnauthorizedOracleEndpoint(
                binding.oracle_program_identity,
                self._verifier.endpoint_id,
                instance_id=instance_id,
            )

        msg_hash = compute_message_hash(binding.app_id, request_id, outcome)
        logger.debug("Verifying %s for %s via %s", hash_to_hex(msg_hash), instance_id, self._verifier.endpoint_id)

        result = self._verifier.verify(request_id, msg_hash, signature, binding.group_public_key)
        if not result.is_confirmed():
            raise SignatureRejected(result, instance_id=instance_id)

        resolved_at = int(now)
        if not self.store.resolve(instance_id, outcome, resolved_at, request_id.hex()):
            # Another commit landed between the read above and this write.
            raise AlreadyResolved(
                f"Question instance {instance_id!r} is already resolved",
                instance_id=instance_id,
            )

        self.audit.commit_confirmed(instance_id, outcome, hash_to_hex(msg_hash))
        return CommitReceipt(
            instance_id=instance_id,
            outcome=outcome,
            request_id=request_id.hex(),
            message_hash=msg_hash,
            resolved_at=resolved_at,
            verification=result,
        )


def _as_request_id(request_id: Union[RequestId, bytes]) -> RequestId:
    if isinstance(request_id, RequestId):
        return request_id
    if isinstance(request_id, (bytes, bytearray)):
        return RequestId(val=bytes(request_id))
    raise InvalidParameter(f"request_id must be bytes or RequestId, got {type(request_id).__name__}")
