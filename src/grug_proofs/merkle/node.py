"""
Merkle Tree Nodes

A node of the Grug Merkle tree is either an internal node or a leaf node.
Nodes only appear in proofs, as the witness of a non-membership proof.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..errors import MalformedProof
from .hashing import Digest, ensure_digest, hash_internal, hash_leaf


@dataclass(frozen=True)
class InternalNode:
    """
    An internal node. Either child may be absent.

    Attributes:
        left_hash: Hash of the left child (bit 0), None if there is none
        right_hash: Hash of the right child (bit 1), None if there is none
    """
    left_hash: Optional[Digest] = None
    right_hash: Optional[Digest] = None

    def validate(self) -> None:
        for child in (self.left_hash, self.right_hash):
            if child is not None:
                ensure_digest(child)

    def hash(self) -> Digest:
        return hash_internal(self.left_hash, self.right_hash)


@dataclass(frozen=True)
class LeafNode:
    """
    A leaf node.

    Attributes:
        key_hash: SHA-256 of the key stored at this leaf
        value_hash: SHA-256 of the value stored at this leaf
    """
    key_hash: Digest
    value_hash: Digest

    def validate(self) -> None:
        ensure_digest(self.key_hash)
        ensure_digest(self.value_hash)

    def hash(self) -> Digest:
        return hash_leaf(self.key_hash, self.value_hash)


Node = Union[InternalNode, LeafNode]


def validate_node(node: Node) -> None:
    """
    Check that `node` is exactly one of the two node kinds and well formed.

    Raises:
        MalformedProof: If the value is not an InternalNode or a LeafNode
        IncorrectHashLength: If one of its hashes is not 32 bytes
    """
    if not isinstance(node, (InternalNode, LeafNode)):
        raise MalformedProof(
            f"Expected an internal or a leaf node, got {type(node).__name__}"
        )
    node.validate()
