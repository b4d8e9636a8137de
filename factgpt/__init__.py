"""
FactGPT Oracle-Attested Outcome Resolution

Version: 1.0.0
License: Apache 2.0

Resolves a single yes/no question ("did event X happen by date D?") by
committing an oracle network's signed answer exactly once, before a deadline.

The oracle group signs:
    Keccak-256(be32(app_id) || request_id || "true" | "false")

There is no third answer. A question that is never committed before its
deadline stays UNRESOLVED forever.

Usage:
    from factgpt import (
        ResolutionProtocol,
        Ed25519OracleGroup,
        Ed25519OracleVerifier,
        RequestId,
    )

    group = Ed25519OracleGroup()
    verifier = Ed25519OracleVerifier()
    protocol = ResolutionProtocol(verifier=verifier)

    protocol.initialize(
        owner="alice",
        prompt="Did X happen?",
        deadline=deadline,
        oracle_app_info=group.app_info(app_id=42),
        oracle_program_identity=verifier.endpoint_id,
    )

    request_id = RequestId(b"...")
    h = protocol.message_hash(True, request_id)
    receipt = protocol.commit_outcome(True, request_id, group.sign(request_id, h))
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Wire types
from .primitives import (
    RequestId,
    SchnorrSignature,
    GroupPublicKey,
    OracleAppInfo,
)

# Message construction and hashing
from .canonicalization import (
    app_id_bytes,
    encode_outcome,
    build_message,
)
from .hashing import (
    keccak256,
    keccak256_hex,
    message_hash,
    hash_to_hex,
    verify_message_hash,
)

# Records and storage
from .records import (
    QuestionRegistry,
    OracleBinding,
    Outcome,
    QuestionState,
)
from .store import (
    StateStore,
    InMemoryStateStore,
    SQLiteStateStore,
    record_key,
    STATE_ACCOUNT_TAG,
    MUON_INFO_TAG,
    DEFAULT_INSTANCE_ID,
)

# Oracle capability
from .oracle import (
    OracleVerifier,
    VerificationOutcome,
    VerificationResult,
)
from .signing import (
    Ed25519OracleGroup,
    Ed25519OracleVerifier,
    LOCAL_ORACLE_ENDPOINT,
)
from .remote import RemoteOracleVerifier

# Protocol
from .protocol import (
    ResolutionProtocol,
    CommitReceipt,
)

# Errors
from .errors import (
    ResolutionError,
    AlreadyInitialized,
    NotInitialized,
    DeadlineExpired,
    AlreadyResolved,
    SignatureRejected,
    UnauthorizedOracleEndpoint,
    InvalidParameter,
)


__all__ = [
    # Version
    "__version__",

    # Wire types
    "RequestId",
    "SchnorrSignature",
    "GroupPublicKey",
    "OracleAppInfo",

    # Message construction
    "app_id_bytes",
    "encode_outcome",
    "build_message",

    # Hashing
    "keccak256",
    "keccak256_hex",
    "message_hash",
    "hash_to_hex",
    "verify_message_hash",

    # Records
    "QuestionRegistry",
    "OracleBinding",
    "Outcome",
    "QuestionState",

    # Storage
    "StateStore",
    "InMemoryStateStore",
    "SQLiteStateStore",
    "record_key",
    "STATE_ACCOUNT_TAG",
    "MUON_INFO_TAG",
    "DEFAULT_INSTANCE_ID",

    # Oracle capability
    "OracleVerifier",
    "VerificationOutcome",
    "VerificationResult",
    "Ed25519OracleGroup",
    "Ed25519OracleVerifier",
    "LOCAL_ORACLE_ENDPOINT",
    "RemoteOracleVerifier",

    # Protocol
    "ResolutionProtocol",
    "CommitReceipt",

    # Errors
    "ResolutionError",
    "AlreadyInitialized",
    "NotInitialized",
    "DeadlineExpired",
    "AlreadyResolved",
    "SignatureRejected",
    "UnauthorizedOracleEndpoint",
    "InvalidParameter",
]
