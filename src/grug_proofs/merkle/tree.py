"""
Reference Merkle Tree

An in-memory build of the Grug Merkle tree, used to produce roots and proofs
that the verifier accepts: test fixtures, the CLI `prove` command, and
debugging proofs obtained from a live chain.

Tree shape:
- Each key is placed by the bits of its hash, bit 0 first
- A subtree holding a single key is a leaf node
- A subtree holding several keys is an internal node; a side holding no key
  is an absent child
- The empty tree has no root
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .bits import bit_at
from .hashing import Digest, hash_internal, sha256
from .node import InternalNode, LeafNode
from .proof import MembershipProof, NonMembershipProof, Proof


def split_leaves(leaves: List[LeafNode], depth: int) -> Tuple[List[LeafNode], List[LeafNode]]:
    """
    Partition leaves by the bit of their key hash at `depth`.

    Returns:
        Tuple of (left, right) where left holds the leaves with bit 0
    """
    left = [leaf for leaf in leaves if bit_at(leaf.key_hash, depth) == 0]
    right = [leaf for leaf in leaves if bit_at(leaf.key_hash, depth) == 1]
    return left, right


def subtree_hash(leaves: List[LeafNode], depth: int) -> Optional[Digest]:
    """
    Hash of the subtree holding `leaves`, rooted at `depth`.

    Args:
        leaves: Leaves sharing the first `depth` bits of their key hashes
        depth: Depth of the subtree root

    Returns:
        32-byte node hash, or None for an empty subtree
    """
    if not leaves:
        return None
    if len(leaves) == 1:
        return leaves[0].hash()

    left, right = split_leaves(leaves, depth)
    return hash_internal(subtree_hash(left, depth + 1), subtree_hash(right, depth + 1))


class MerkleTree:
    """
    In-memory Grug Merkle tree over raw key-value pairs.

    Example:
        >>> tree = MerkleTree({b"foo": b"bar"})
        >>> proof = tree.prove(b"foo")
        >>> verify_membership(tree.root_hash, b"foo", b"bar", proof)
    """

    def __init__(self, entries: Optional[Dict[bytes, bytes]] = None):
        self._leaves: Dict[Digest, LeafNode] = {}
        for key, value in (entries or {}).items():
            self.insert(key, value)

    def __len__(self) -> int:
        return len(self._leaves)

    def __contains__(self, key: bytes) -> bool:
        return sha256(key) in self._leaves

    def insert(self, key: bytes, value: bytes) -> None:
        key_hash = sha256(key)
        self._leaves[key_hash] = LeafNode(key_hash=key_hash, value_hash=sha256(value))

    def update(self, entries: Iterable[Tuple[bytes, bytes]]) -> None:
        for key, value in entries:
            self.insert(key, value)

    def remove(self, key: bytes) -> None:
        self._leaves.pop(sha256(key), None)

    @property
    def root_hash(self) -> Optional[Digest]:
        """Root hash of the tree, None when the tree is empty."""
        return subtree_hash(list(self._leaves.values()), 0)

    def prove(self, key: bytes) -> Proof:
        """
        Generate a proof for `key`.

        Walks the key's path from the root, collecting the hash of the other
        side at each depth, until the path ends at a leaf or at an internal
        node lacking the child the key would go to.

        Args:
            key: Raw key bytes

        Returns:
            MembershipProof if the key is in the tree, NonMembershipProof
            otherwise

        Raises:
            ValueError: If the tree is empty
        """
        if not self._leaves:
            raise ValueError("Cannot generate proof for an empty tree")

        key_hash = sha256(key)
        leaves = list(self._leaves.values())
        sibling_hashes: List[Optional[Digest]] = []
        depth = 0

        while True:
            if len(leaves) == 1:
                leaf = leaves[0]
                if leaf.key_hash == key_hash:
                    return MembershipProof(sibling_hashes=sibling_hashes)
                return NonMembershipProof(node=leaf, sibling_hashes=sibling_hashes)

            left, right = split_leaves(leaves, depth)
            if bit_at(key_hash, depth) == 0:
                on_path, off_path = left, right
            else:
                on_path, off_path = right, left

            if not on_path:
                node = InternalNode(
                    left_hash=subtree_hash(left, depth + 1),
                    right_hash=subtree_hash(right, depth + 1),
                )
                return NonMembershipProof(node=node, sibling_hashes=sibling_hashes)

            sibling_hashes.append(subtree_hash(off_path, depth + 1))
            leaves = on_path
            depth += 1
