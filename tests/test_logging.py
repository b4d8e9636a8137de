"""
FactGPT Audit Logging Test Suite
"""

import json
import logging
import unittest

from factgpt import (
    GroupPublicKey,
    OracleAppInfo,
    RequestId,
    ResolutionProtocol,
    SchnorrSignature,
    SignatureRejected,
    UnauthorizedOracleEndpoint,
)
from factgpt.logging_config import AuditLogger, StructuredFormatter
from factgpt.signing import Ed25519OracleVerifier


class CapturingHandler(logging.Handler):

    def __init__(self):
        super().__init__()
        self.records = []
        self.setFormatter(StructuredFormatter())

    def emit(self, record):
        self.records.append(json.loads(self.format(record)))


class TestAuditEvents(unittest.TestCase):

    def setUp(self):
        self.handler = CapturingHandler()
        self.logger = logging.getLogger("factgpt.audit.test")
        self.logger.setLevel(logging.DEBUG)
        self.logger.addHandler(self.handler)
        self.addCleanup(self.logger.removeHandler, self.handler)

        self.protocol = ResolutionProtocol(
            verifier=Ed25519OracleVerifier(),
            clock=lambda: 1_700_000_000,
            audit=AuditLogger("factgpt.audit.test"),
        )

    def events(self):
        return [r["event_type"] for r in self.handler.records]

    def test_initialize_logged(self):
        self.protocol.initialize(
            owner="owner-account",
            prompt="Did X happen?",
            deadline=1_700_003_600,
            oracle_app_info=OracleAppInfo(group_public_key=GroupPublicKey(x=b"\x01" * 32), app_id=42),
            oracle_program_identity="local-ed25519-oracle",
        )

        self.assertEqual(self.events(), ["QUESTION_INITIALIZED"])
        record = self.handler.records[0]
        self.assertEqual(record["level"], "INFO")
        self.assertEqual(record["app_id"], "42")
        self.assertEqual(record["deadline"], 1_700_003_600)

    def test_rejected_commit_logged_with_request_id(self):
        self.protocol.initialize(
            owner="owner-account",
            prompt="Did X happen?",
            deadline=1_700_003_600,
            oracle_app_info=OracleAppInfo(group_public_key=GroupPublicKey(x=b"\x01" * 32), app_id=42),
            oracle_program_identity="local-ed25519-oracle",
        )
        request_id = RequestId(b"\xaa" * 4)

        with self.assertRaises(SignatureRejected):
            self.protocol.commit_outcome(
                True, request_id, SchnorrSignature(r=b"\x00" * 32, s=b"\x00" * 32)
            )

        self.assertEqual(self.events()[-2:], ["COMMIT_REQUESTED", "COMMIT_REJECTED"])
        rejected = self.handler.records[-1]
        self.assertEqual(rejected["level"], "WARNING")
        self.assertEqual(rejected["code"], "SIGNATURE_REJECTED")
        self.assertEqual(rejected["request_id"], "aaaaaaaa")

    def test_endpoint_mismatch_is_security_event(self):
        self.protocol.initialize(
            owner="owner-account",
            prompt="Did X happen?",
            deadline=1_700_003_600,
            oracle_app_info=OracleAppInfo(group_public_key=GroupPublicKey(x=b"\x01" * 32), app_id=42),
            oracle_program_identity="muon-mainnet",
        )

        with self.assertRaises(UnauthorizedOracleEndpoint):
            self.protocol.commit_outcome(
                True, b"\x01", SchnorrSignature(r=b"\x00" * 32, s=b"\x00" * 32)
            )

        self.assertIn("SECURITY_EVENT", self.events())
        event = [r for r in self.handler.records if r["event_type"] == "SECURITY_EVENT"][0]
        self.assertEqual(event["level"], "ERROR")
        self.assertEqual(event["bound_endpoint"], "muon-mainnet")


if __name__ == "__main__":
    unittest.main()
