"""
FactGPT Local Oracle Group

An oracle group for development networks and tests. It signs message
hashes with Ed25519 (RFC 8032), a Schnorr-family scheme, so signatures
fit the SchnorrSignature wire type: r is the 32-byte commitment point and
s the 32-byte scalar. Ed25519 keys carry no parity bit; parity is 0.

Production deployments verify through the oracle network itself
(see factgpt.remote).
"""

import logging
from typing import Optional, Union

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

from .canonicalization import request_id_bytes
from .hashing import hash_to_bytes
from .oracle import OracleVerifier, VerificationResult
from .primitives import GroupPublicKey, OracleAppInfo, RequestId, SchnorrSignature

logger = logging.getLogger(__name__)

LOCAL_ORACLE_ENDPOINT = "local-ed25519-oracle"


def signing_payload(request_id: Union[RequestId, bytes], message_hash: int) -> bytes:
    """Bytes signed by the group: request_id || be32(message_hash)."""
    return request_id_bytes(request_id) + hash_to_bytes(message_hash)


class Ed25519OracleGroup:
    """
    Ed25519 oracle signing group.

    Usage:
        group = Ed25519OracleGroup()
        app_info = group.app_info(app_id=42)
        sig = group.sign(request_id, message_hash)
    """

    def __init__(self, signing_key: Optional[bytes] = None):
        if signing_key is None:
            self._signing_key = SigningKey.generate()
        else:
            self._signing_key = SigningKey(signing_key)

    @property
    def group_public_key(self) -> GroupPublicKey:
        return GroupPublicKey(x=bytes(self._signing_key.verify_key), parity=0)

    def app_info(self, app_id: int) -> OracleAppInfo:
        return OracleAppInfo(group_public_key=self.group_public_key, app_id=app_id)

    def export_signing_key(self) -> bytes:
        return bytes(self._signing_key)

    def sign(self, request_id: Union[RequestId, bytes], message_hash: int) -> SchnorrSignature:
        """Sign a message hash for a request round."""
        signed = self._signing_key.sign(signing_payload(request_id, message_hash))
        signature = signed.signature
        return SchnorrSignature(r=signature[:32], s=signature[32:], parity=0)


class Ed25519OracleVerifier(OracleVerifier):
    """Verifies signatures produced by an Ed25519OracleGroup."""

    def __init__(self, endpoint_id: str = LOCAL_ORACLE_ENDPOINT):
        self._endpoint_id = endpoint_id

    @property
    def endpoint_id(self) -> str:
        return self._endpoint_id

    def verify(
        self,
        request_id: RequestId,
        message_hash: int,
        signature: SchnorrSignature,
        group_public_key: GroupPublicKey
    ) -> VerificationResult:
        if len(group_public_key.x) != 32:
            return VerificationResult.rejected("Malformed group public key")
        if len(signature.r) != 32 or len(signature.s) != 32:
            return VerificationResult.rejected("Malformed signature")
        if signature.parity != 0 or group_public_key.parity != 0:
            return VerificationResult.rejected("Unexpected parity for Ed25519 group")

        try:
            verify_key = VerifyKey(group_public_key.x)
            verify_key.verify(signing_payload(request_id, message_hash), signature.r + signature.s)
        except BadSignatureError:
            return VerificationResult.rejected("Signature does not match group key")
        except (CryptoError, ValueError) as exc:
            logger.debug("Ed25519 verification error: %s", exc)
            return VerificationResult.rejected("Malformed signature")

        return VerificationResult.confirmed()
