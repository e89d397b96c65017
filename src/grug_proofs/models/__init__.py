"""
Models Package

This package contains the Pydantic models of the project:

- Proof wire models (JSON encoding of proofs and nodes)
- Request and response models of the verification API

Usage:
    from grug_proofs.models import decode_proof

    proof = decode_proof('{"membership": {"sibling_hashes": []}}')
"""

from .api_models import (
    ErrorResponse,
    HealthResponse,
    MembershipRequest,
    NonMembershipRequest,
    VerificationResponse,
)
from .proof_models import (
    InternalNodeModel,
    LeafNodeModel,
    MembershipProofModel,
    NodeModel,
    NonMembershipProofModel,
    ProofModel,
    decode_proof,
    encode_proof,
    proof_to_json,
)

__all__ = [
    'ErrorResponse',
    'HealthResponse',
    'MembershipRequest',
    'NonMembershipRequest',
    'VerificationResponse',
    'InternalNodeModel',
    'LeafNodeModel',
    'MembershipProofModel',
    'NodeModel',
    'NonMembershipProofModel',
    'ProofModel',
    'decode_proof',
    'encode_proof',
    'proof_to_json',
]
