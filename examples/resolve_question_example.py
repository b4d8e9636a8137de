#!/usr/bin/env python3
"""
FactGPT Example - Complete Resolution Flow

Opens a question, has a local oracle group attest the answer, commits it,
and shows that the resolved question cannot be changed afterwards.

Run with: python examples/resolve_question_example.py
"""

import secrets
import time

from factgpt import (
    AlreadyResolved,
    Ed25519OracleGroup,
    Ed25519OracleVerifier,
    RequestId,
    ResolutionProtocol,
    SignatureRejected,
    hash_to_hex,
)
from factgpt.logging_config import configure_logging


def main():
    configure_logging(level="INFO", json_format=False)

    group = Ed25519OracleGroup()
    verifier = Ed25519OracleVerifier()
    protocol = ResolutionProtocol(verifier=verifier)

    now = int(time.time())
    protocol.initialize(
        owner="question-owner",
        prompt="Did X happen?",
        deadline=now + 3600,
        oracle_app_info=group.app_info(app_id=42),
        oracle_program_identity=verifier.endpoint_id,
    )
    print(f"State: {protocol.state().value}")

    # An impostor group cannot resolve the question
    request_id = RequestId(secrets.token_bytes(36))
    h = protocol.message_hash(True, request_id)
    try:
        protocol.commit_outcome(True, request_id, Ed25519OracleGroup().sign(request_id, h))
    except SignatureRejected as exc:
        print(f"Impostor rejected: {exc.reason}")

    # The bound group attests "true"
    print(f"Oracle signs {hash_to_hex(h)}")
    receipt = protocol.commit_outcome(True, request_id, group.sign(request_id, h))
    print(f"Committed: {receipt.to_dict()}")
    print(f"State: {protocol.state().value}")

    # Resolved is terminal
    second_request = RequestId(secrets.token_bytes(36))
    h_false = protocol.message_hash(False, second_request)
    try:
        protocol.commit_outcome(False, second_request, group.sign(second_request, h_false))
    except AlreadyResolved as exc:
        print(f"Second commit refused: {exc}")


if __name__ == "__main__":
    main()
