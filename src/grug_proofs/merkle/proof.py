"""
Merkle Proof Verification

This module defines Grug's Merkle proofs and verifies them against a trusted
root hash.

A proof is either a membership proof (the key exists with the given value)
or a non-membership proof (the key doesn't exist). Both carry the sibling
hashes along the key's path, indexed by depth: index 0 is the child of the
root, the last index is the deepest level. Whether a sibling sits on the left
or on the right is not part of the proof; it is read from the bits of the
key hash, the same way the prover placed the key in the tree.

Verification order is fixed: structural validation first, then the proof
type, then hashing. The first failure is raised; nothing is retried.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from ..errors import IncorrectProofType, MalformedProof, NotCommonPrefix, RootHashMismatch, UnexpectedChild
from .bits import bit_at, common_prefix_length
from .hashing import HASH_BITS, Digest, ensure_digest, hash_internal, hash_leaf, sha256
from .node import InternalNode, Node, validate_node

logger = logging.getLogger(__name__)

SiblingHashes = Tuple[Optional[Digest], ...]


def _validate_sibling_hashes(sibling_hashes: Sequence[Optional[Digest]]) -> None:
    # The key hash has 256 bits, so no path can be deeper than that.
    if len(sibling_hashes) > HASH_BITS:
        raise MalformedProof(
            f"Proof has {len(sibling_hashes)} sibling hashes, at most {HASH_BITS} allowed"
        )
    for sibling in sibling_hashes:
        if sibling is not None:
            ensure_digest(sibling)


@dataclass(frozen=True)
class MembershipProof:
    """
    Proof that a key-value pair exists in the tree.

    Attributes:
        sibling_hashes: Sibling hash at each depth, None for an empty subtree
    """
    sibling_hashes: SiblingHashes = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sibling_hashes", tuple(self.sibling_hashes))

    def validate(self) -> None:
        _validate_sibling_hashes(self.sibling_hashes)

    def verify(self, root_hash: Digest, key_hash: Digest, value_hash: Digest) -> None:
        """Verify the pair (key_hash, value_hash) against `root_hash`."""
        current_hash = hash_leaf(key_hash, value_hash)
        compute_and_compare_root(root_hash, key_hash, self.sibling_hashes, current_hash)


@dataclass(frozen=True)
class NonMembershipProof:
    """
    Proof that a key doesn't exist in the tree.

    Attributes:
        node: The node found where the key's path ends, at depth
            len(sibling_hashes)
        sibling_hashes: Sibling hash at each depth above that node
    """
    node: Node
    sibling_hashes: SiblingHashes = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sibling_hashes", tuple(self.sibling_hashes))

    @property
    def depth(self) -> int:
        return len(self.sibling_hashes)

    def validate(self) -> None:
        validate_node(self.node)
        _validate_sibling_hashes(self.sibling_hashes)
        if isinstance(self.node, InternalNode) and self.depth >= HASH_BITS:
            raise MalformedProof(
                f"Internal node at depth {self.depth} has no key bit to branch on"
            )

    def verify(self, root_hash: Digest, key_hash: Digest) -> None:
        """Verify that `key_hash` is absent from the tree of `root_hash`."""
        if isinstance(self.node, InternalNode):
            # The key's path continues into the child on the side of its next
            # bit. That child must not exist.
            if bit_at(key_hash, self.depth) == 0:
                if self.node.left_hash is not None:
                    raise UnexpectedChild()
            else:
                if self.node.right_hash is not None:
                    raise UnexpectedChild()
            current_hash = self.node.hash()
        else:
            # A leaf found on the key's path must share the path so far, but
            # holds a different key.
            if self.node.key_hash == key_hash:
                raise NotCommonPrefix(
                    "invalid non-membership proof: leaf node holds the key itself"
                )
            prefix = common_prefix_length(self.node.key_hash, key_hash)
            if prefix < self.depth:
                raise NotCommonPrefix(
                    f"invalid non-membership proof: leaf key hash diverges from the key at bit {prefix}"
                )
            current_hash = self.node.hash()

        compute_and_compare_root(root_hash, key_hash, self.sibling_hashes, current_hash)


Proof = Union[MembershipProof, NonMembershipProof]


def validate_proof(proof: Proof) -> None:
    """
    Check the structure of a proof before anything is hashed.

    Raises:
        MalformedProof: If the value is not exactly one proof kind, its
            witness node is malformed, or its path is deeper than 256
        IncorrectHashLength: If a hash in the proof is not 32 bytes
    """
    if not isinstance(proof, (MembershipProof, NonMembershipProof)):
        raise MalformedProof(
            f"Expected a membership or a non-membership proof, got {type(proof).__name__}"
        )
    proof.validate()


def compute_root(
    key_hash: Digest,
    sibling_hashes: Sequence[Optional[Digest]],
    current_hash: Digest,
) -> Digest:
    """
    Fold a node hash up to the root along the path of `key_hash`.

    Walks from the deepest sibling to the root. At depth d, bit d of the key
    hash says whether the current node is the left (0) or right (1) child.

    Args:
        key_hash: Hash of the key; its bits choose left or right
        sibling_hashes: Sibling hash at each depth, None for an empty subtree
        current_hash: Hash of the node at depth len(sibling_hashes)

    Returns:
        The root hash implied by the proof
    """
    for depth in range(len(sibling_hashes) - 1, -1, -1):
        sibling_hash = sibling_hashes[depth]
        if bit_at(key_hash, depth) == 0:
            current_hash = hash_internal(current_hash, sibling_hash)
        else:
            current_hash = hash_internal(sibling_hash, current_hash)
    return current_hash


def compute_and_compare_root(
    root_hash: Digest,
    key_hash: Digest,
    sibling_hashes: Sequence[Optional[Digest]],
    current_hash: Digest,
) -> None:
    computed = compute_root(key_hash, sibling_hashes, current_hash)
    if computed != root_hash:
        logger.debug(
            f"Root hash mismatch: computed {computed.hex()}, expected {bytes(root_hash).hex()}"
        )
        raise RootHashMismatch()


def _expect(proof: Proof, kind: type) -> Proof:
    validate_proof(proof)
    if not isinstance(proof, kind):
        expected = "membership" if kind is MembershipProof else "non-membership"
        raise IncorrectProofType(
            f"incorrect proof type: expected a {expected} proof, got {type(proof).__name__}"
        )
    return proof


def verify_membership(root_hash: Digest, key: bytes, value: bytes, proof: Proof) -> None:
    """
    Verify that `key` exists with `value` in the tree of `root_hash`.

    The raw key and value are hashed here; the tree stores their hashes.

    Args:
        root_hash: Trusted 32-byte root hash
        key: Raw key bytes
        value: Raw value bytes
        proof: Decoded proof

    Raises:
        MalformedProof: If the proof is structurally invalid
        IncorrectHashLength: If a hash in the proof is not 32 bytes
        IncorrectProofType: If the proof is a non-membership proof
        RootHashMismatch: If the proof doesn't lead to `root_hash`
    """
    membership = _expect(proof, MembershipProof)
    membership.verify(ensure_digest(root_hash), sha256(key), sha256(value))


def verify_non_membership(root_hash: Digest, key: bytes, proof: Proof) -> None:
    """
    Verify that `key` doesn't exist in the tree of `root_hash`.

    Args:
        root_hash: Trusted 32-byte root hash
        key: Raw key bytes
        proof: Decoded proof

    Raises:
        MalformedProof: If the proof is structurally invalid
        IncorrectHashLength: If a hash in the proof is not 32 bytes
        IncorrectProofType: If the proof is a membership proof
        UnexpectedChild: If an internal witness has a child on the key's side
        NotCommonPrefix: If a leaf witness is off the key's path
        RootHashMismatch: If the proof doesn't lead to `root_hash`
    """
    non_membership = _expect(proof, NonMembershipProof)
    non_membership.verify(ensure_digest(root_hash), sha256(key))


def verify_membership_hashed(
    root_hash: Digest, key_hash: Digest, value_hash: Digest, proof: Proof
) -> None:
    """Same as `verify_membership`, for callers holding the key and value hashes."""
    membership = _expect(proof, MembershipProof)
    membership.verify(ensure_digest(root_hash), ensure_digest(key_hash), ensure_digest(value_hash))


def verify_non_membership_hashed(root_hash: Digest, key_hash: Digest, proof: Proof) -> None:
    """Same as `verify_non_membership`, for callers holding the key hash."""
    non_membership = _expect(proof, NonMembershipProof)
    non_membership.verify(ensure_digest(root_hash), ensure_digest(key_hash))
