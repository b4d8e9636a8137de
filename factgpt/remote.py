"""
FactGPT Remote Oracle Verifier

Forwards verification to the oracle network's HTTP verification
endpoint. Fails closed: any transport error, non-200 status or malformed
response is a rejection.
"""

import logging
from typing import Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from . import config
from .hashing import hash_to_hex
from .oracle import OracleVerifier, VerificationResult
from .primitives import GroupPublicKey, RequestId, SchnorrSignature

logger = logging.getLogger(__name__)


class SignaturePayload(BaseModel):
    r: str
    s: str
    parity: int = 0


class GroupPublicKeyPayload(BaseModel):
    x: str
    parity: int = 0


class VerifyRequest(BaseModel):
    endpoint_id: str
    request_id: str
    message_hash: str
    signature: SignaturePayload
    group_public_key: GroupPublicKeyPayload


class VerifyResponse(BaseModel):
    confirmed: bool
    reason: Optional[str] = Field(default=None)


class RemoteOracleVerifier(OracleVerifier):
    """
    Oracle verifier backed by an HTTP endpoint.

    Args:
        endpoint_id: Identity of the oracle network entry point
        url: Verification URL (default: FACTGPT_ORACLE_URL)
        timeout: Request timeout in seconds (default: FACTGPT_ORACLE_TIMEOUT)
    """

    def __init__(self, endpoint_id: str, url: Optional[str] = None, timeout: Optional[float] = None):
        self._endpoint_id = endpoint_id
        self.url = url or config.ORACLE_URL
        self.timeout = timeout if timeout is not None else config.ORACLE_TIMEOUT
        if not self.url:
            raise ValueError("Oracle verification URL is not configured")

    @property
    def endpoint_id(self) -> str:
        return self._endpoint_id

    def build_request(
        self,
        request_id: RequestId,
        message_hash: int,
        signature: SchnorrSignature,
        group_public_key: GroupPublicKey
    ) -> VerifyRequest:
        return VerifyRequest(
            endpoint_id=self._endpoint_id,
            request_id=request_id.hex(),
            message_hash=hash_to_hex(message_hash),
            signature=SignaturePayload(**signature.to_dict()),
            group_public_key=GroupPublicKeyPayload(**group_public_key.to_dict()),
        )

    def verify(
        self,
        request_id: RequestId,
        message_hash: int,
        signature: SchnorrSignature,
        group_public_key: GroupPublicKey
    ) -> VerificationResult:
        payload = self.build_request(request_id, message_hash, signature, group_public_key)

        try:
            response = requests.post(self.url, json=payload.model_dump(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Oracle endpoint %s unreachable: %s", self._endpoint_id, exc)
            return VerificationResult.rejected(
                "Oracle endpoint unreachable",
                details={"error": str(exc)}
            )

        if response.status_code != 200:
            return VerificationResult.rejected(
                f"Oracle endpoint returned HTTP {response.status_code}",
                details={"status_code": response.status_code}
            )

        try:
            body = VerifyResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Malformed response from oracle endpoint %s: %s", self._endpoint_id, exc)
            return VerificationResult.rejected("Malformed oracle response")

        if body.confirmed:
            return VerificationResult.confirmed()
        return VerificationResult.rejected(body.reason or "Oracle declined signature")
