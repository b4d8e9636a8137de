"""
FactGPT Canonical Message Encoding

Builds the exact byte sequence the oracle group signs for an outcome.
Semantically identical commits always produce identical bytes.
"""

from typing import Union

from .primitives import RequestId, U256_MAX

APP_ID_WIDTH = 32

OUTCOME_TRUE = b"true"
OUTCOME_FALSE = b"false"


def app_id_bytes(app_id: int) -> bytes:
    """Encode an app id as 32 big-endian bytes, zero-padded."""
    if isinstance(app_id, bool) or not isinstance(app_id, int):
        raise ValueError("app_id must be an integer")
    if not 0 <= app_id <= U256_MAX:
        raise ValueError("app_id must fit in 256 bits")
    return app_id.to_bytes(APP_ID_WIDTH, "big")


def encode_outcome(outcome: bool) -> bytes:
    """
    Encode an outcome as lowercase ASCII text.

    The oracle network hashes the literal words, never 0x01/0x00.
    """
    if not isinstance(outcome, bool):
        raise ValueError(f"outcome must be a bool, got {type(outcome).__name__}")
    return OUTCOME_TRUE if outcome else OUTCOME_FALSE


def request_id_bytes(request_id: Union[RequestId, bytes]) -> bytes:
    if isinstance(request_id, RequestId):
        return request_id.val
    if isinstance(request_id, (bytes, bytearray)):
        return bytes(request_id)
    raise ValueError(f"Cannot encode request id of type: {type(request_id)}")


def build_message(app_id: int, request_id: Union[RequestId, bytes], outcome: bool) -> bytes:
    """
    Concatenate the message fields with no delimiters:

        be32(app_id) || request_id || "true" | "false"
    """
    return app_id_bytes(app_id) + request_id_bytes(request_id) + encode_outcome(outcome)


if __name__ == "__main__":
    message = build_message(42, b"\x01" * 36, True)
    print("Canonical message:")
    print(message.hex())
