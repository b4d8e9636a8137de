"""
FactGPT Local Oracle Group Test Suite
"""

import unittest

from factgpt import (
    Ed25519OracleGroup,
    Ed25519OracleVerifier,
    GroupPublicKey,
    LOCAL_ORACLE_ENDPOINT,
    RequestId,
    SchnorrSignature,
    VerificationOutcome,
    message_hash,
)

REQUEST_ID = RequestId(b"\x42" * 36)


class TestEd25519OracleGroup(unittest.TestCase):

    def setUp(self):
        self.group = Ed25519OracleGroup()
        self.verifier = Ed25519OracleVerifier()
        self.hash = message_hash(42, REQUEST_ID, True)

    def test_signature_shape(self):
        sig = self.group.sign(REQUEST_ID, self.hash)
        self.assertEqual(len(sig.r), 32)
        self.assertEqual(len(sig.s), 32)
        self.assertEqual(sig.parity, 0)

    def test_valid_signature_confirmed(self):
        sig = self.group.sign(REQUEST_ID, self.hash)
        result = self.verifier.verify(REQUEST_ID, self.hash, sig, self.group.group_public_key)
        self.assertEqual(result.outcome, VerificationOutcome.CONFIRMED)

    def test_other_hash_rejected(self):
        sig = self.group.sign(REQUEST_ID, self.hash)
        other = message_hash(42, REQUEST_ID, False)
        result = self.verifier.verify(REQUEST_ID, other, sig, self.group.group_public_key)
        self.assertEqual(result.outcome, VerificationOutcome.REJECTED)

    def test_other_request_rejected(self):
        """The request round is part of what the group signs."""
        sig = self.group.sign(REQUEST_ID, self.hash)
        result = self.verifier.verify(RequestId(b"\x43" * 36), self.hash, sig, self.group.group_public_key)
        self.assertFalse(result.is_confirmed())

    def test_other_group_rejected(self):
        sig = self.group.sign(REQUEST_ID, self.hash)
        result = self.verifier.verify(REQUEST_ID, self.hash, sig, Ed25519OracleGroup().group_public_key)
        self.assertFalse(result.is_confirmed())

    def test_malformed_inputs_rejected_not_raised(self):
        sig = self.group.sign(REQUEST_ID, self.hash)
        key = self.group.group_public_key

        short = SchnorrSignature(r=sig.r[:31], s=sig.s)
        self.assertFalse(self.verifier.verify(REQUEST_ID, self.hash, short, key).is_confirmed())

        bad_key = GroupPublicKey(x=b"\x00" * 31)
        self.assertFalse(self.verifier.verify(REQUEST_ID, self.hash, sig, bad_key).is_confirmed())

        odd = SchnorrSignature(r=sig.r, s=sig.s, parity=1)
        self.assertFalse(self.verifier.verify(REQUEST_ID, self.hash, odd, key).is_confirmed())

    def test_key_export_round_trip(self):
        restored = Ed25519OracleGroup(signing_key=self.group.export_signing_key())
        self.assertEqual(restored.group_public_key, self.group.group_public_key)

    def test_app_info(self):
        info = self.group.app_info(app_id=42)
        self.assertEqual(info.app_id, 42)
        self.assertEqual(info.group_public_key, self.group.group_public_key)

    def test_endpoint_id(self):
        self.assertEqual(Ed25519OracleVerifier().endpoint_id, LOCAL_ORACLE_ENDPOINT)
        self.assertEqual(Ed25519OracleVerifier("devnet-oracle").endpoint_id, "devnet-oracle")


if __name__ == "__main__":
    unittest.main()
