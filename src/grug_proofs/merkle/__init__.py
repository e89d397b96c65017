"""
Grug Merkle Tree Operations

This package provides verification of Grug Merkle proofs, organized as:
- bits: bit access to key hashes
- hashing: domain-separated node hashing and digest helpers
- node: internal and leaf nodes
- proof: membership / non-membership proofs and their verification
- tree: in-memory reference tree producing roots and proofs
"""

# Bit access
from .bits import bit_at, common_prefix_length

# Hashing
from .hashing import (
    HASH_BITS,
    HASH_LENGTH,
    HASH_PREFIX_INTERNAL_NODE,
    HASH_PREFIX_LEAF_NODE,
    ZERO_HASH,
    Digest,
    digest_from_base64,
    digest_to_base64,
    ensure_digest,
    hash_internal,
    hash_leaf,
    sha256,
)

# Nodes
from .node import InternalNode, LeafNode, Node, validate_node

# Proofs and verification
from .proof import (
    MembershipProof,
    NonMembershipProof,
    Proof,
    compute_and_compare_root,
    compute_root,
    validate_proof,
    verify_membership,
    verify_membership_hashed,
    verify_non_membership,
    verify_non_membership_hashed,
)

# Reference tree
from .tree import MerkleTree, split_leaves, subtree_hash

__all__ = [
    # Bits
    "bit_at",
    "common_prefix_length",
    # Hashing
    "HASH_BITS",
    "HASH_LENGTH",
    "HASH_PREFIX_INTERNAL_NODE",
    "HASH_PREFIX_LEAF_NODE",
    "ZERO_HASH",
    "Digest",
    "digest_from_base64",
    "digest_to_base64",
    "ensure_digest",
    "hash_internal",
    "hash_leaf",
    "sha256",
    # Nodes
    "InternalNode",
    "LeafNode",
    "Node",
    "validate_node",
    # Proofs
    "MembershipProof",
    "NonMembershipProof",
    "Proof",
    "compute_and_compare_root",
    "compute_root",
    "validate_proof",
    "verify_membership",
    "verify_membership_hashed",
    "verify_non_membership",
    "verify_non_membership_hashed",
    # Tree
    "MerkleTree",
    "split_leaves",
    "subtree_hash",
]
