"""
Grug Proofs

Verification of membership and non-membership proofs of the Grug Merkle
tree, with a light client wrapper, a REST API and a CLI.

Usage:
    from grug_proofs import decode_proof, verify_membership

    verify_membership(root_hash, b"key", b"value", decode_proof(proof_json))
"""

__version__ = "0.1.0"

from .errors import (
    GrugProofError,
    IncorrectHashLength,
    IncorrectProofType,
    MalformedProof,
    NotCommonPrefix,
    RootHashMismatch,
    UnexpectedChild,
)
from .merkle import (
    InternalNode,
    LeafNode,
    MembershipProof,
    MerkleTree,
    NonMembershipProof,
    bit_at,
    hash_internal,
    hash_leaf,
    validate_proof,
    verify_membership,
    verify_non_membership,
)
from .models import decode_proof, encode_proof

__all__ = [
    '__version__',
    'GrugProofError',
    'IncorrectHashLength',
    'IncorrectProofType',
    'MalformedProof',
    'NotCommonPrefix',
    'RootHashMismatch',
    'UnexpectedChild',
    'InternalNode',
    'LeafNode',
    'MembershipProof',
    'MerkleTree',
    'NonMembershipProof',
    'bit_at',
    'hash_internal',
    'hash_leaf',
    'validate_proof',
    'verify_membership',
    'verify_non_membership',
    'decode_proof',
    'encode_proof',
]
