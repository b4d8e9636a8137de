"""
FactGPT Oracle Wire Types

Structures exchanged with the oracle network. The resolution protocol
never inspects the internals of signatures or group keys; it only
forwards them to the verification capability.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

U256_MAX = 2 ** 256 - 1


def _to_bytes(value: Union[bytes, str], field_name: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return bytes.fromhex(value[2:] if value[:2].lower() == "0x" else value)
        except ValueError:
            raise ValueError(f"{field_name} must be bytes or a hex string")
    raise ValueError(f"{field_name} must be bytes or a hex string")


@dataclass(frozen=True)
class RequestId:
    """Opaque correlation identifier of an oracle signing round."""
    val: bytes

    def __post_init__(self):
        object.__setattr__(self, "val", _to_bytes(self.val, "request_id"))

    @classmethod
    def from_hex(cls, value: str) -> 'RequestId':
        return cls(val=_to_bytes(value, "request_id"))

    def hex(self) -> str:
        return self.val.hex()


@dataclass(frozen=True)
class SchnorrSignature:
    """Threshold signature produced by the oracle group."""
    r: bytes
    s: bytes
    parity: int = 0

    def __post_init__(self):
        object.__setattr__(self, "r", _to_bytes(self.r, "signature.r"))
        object.__setattr__(self, "s", _to_bytes(self.s, "signature.s"))

    def to_dict(self) -> Dict[str, Any]:
        return {"r": self.r.hex(), "s": self.s.hex(), "parity": self.parity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchnorrSignature':
        return cls(r=data["r"], s=data["s"], parity=int(data.get("parity", 0)))


@dataclass(frozen=True)
class GroupPublicKey:
    """Public key of an oracle signing group."""
    x: bytes
    parity: int = 0

    def __post_init__(self):
        object.__setattr__(self, "x", _to_bytes(self.x, "group_public_key.x"))

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x.hex(), "parity": self.parity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GroupPublicKey':
        return cls(x=data["x"], parity=int(data.get("parity", 0)))


@dataclass(frozen=True)
class OracleAppInfo:
    """
    Identity of the oracle application answering a question.

    app_id is a 256-bit unsigned integer; it is hashed as 32 big-endian bytes.
    """
    group_public_key: GroupPublicKey
    app_id: int

    def __post_init__(self):
        if isinstance(self.app_id, bool) or not isinstance(self.app_id, int):
            raise ValueError("app_id must be an integer")
        if not 0 <= self.app_id <= U256_MAX:
            raise ValueError("app_id must fit in 256 bits")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_public_key": self.group_public_key.to_dict(),
            "app_id": str(self.app_id),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OracleAppInfo':
        return cls(
            group_public_key=GroupPublicKey.from_dict(data["group_public_key"]),
            app_id=int(data["app_id"]),
        )
