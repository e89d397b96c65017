#!/usr/bin/env python3
"""
Tests for membership and non-membership proof verification.

Roots are built by hand from hash_leaf / hash_internal so the expected
folding order is spelled out in each test.
"""

import itertools
import os
import sys
import unittest
from unittest import mock

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from grug_proofs.errors import (
    GrugProofError,
    IncorrectHashLength,
    IncorrectProofType,
    MalformedProof,
    NotCommonPrefix,
    RootHashMismatch,
    UnexpectedChild,
)
from grug_proofs.merkle.bits import bit_at
from grug_proofs.merkle.hashing import ZERO_HASH, hash_internal, hash_leaf, sha256
from grug_proofs.merkle.node import InternalNode, LeafNode
from grug_proofs.merkle.proof import (
    MembershipProof,
    NonMembershipProof,
    compute_root,
    validate_proof,
    verify_membership,
    verify_membership_hashed,
    verify_non_membership,
    verify_non_membership_hashed,
)
from grug_proofs.merkle.tree import MerkleTree


def find_key(*bits, exclude=()):
    """Find a key whose hash starts with the given bits."""
    for i in itertools.count():
        key = b"key-%d" % i
        if key in exclude:
            continue
        key_hash = sha256(key)
        if all(bit_at(key_hash, depth) == bit for depth, bit in enumerate(bits)):
            return key


S0 = sha256(b"sibling-0")
S1 = sha256(b"sibling-1")


class TestMembership(unittest.TestCase):
    """Test verification of membership proofs."""

    def test_single_leaf_tree(self):
        root = hash_leaf(sha256(b"foo"), sha256(b"bar"))
        self.assertIsNone(verify_membership(root, b"foo", b"bar", MembershipProof()))

    def test_single_leaf_tree_wrong_value(self):
        root = hash_leaf(sha256(b"foo"), sha256(b"bar"))
        with self.assertRaises(RootHashMismatch):
            verify_membership(root, b"foo", b"baz", MembershipProof())

    def test_two_level_path(self):
        # Key hash bits: bit0 = 0, bit1 = 1.
        key = find_key(0, 1)
        leaf = hash_leaf(sha256(key), sha256(b"value"))

        # Depth 1 first: bit1 = 1, so the node is the right child of S1's parent.
        depth_one = hash_internal(S1, leaf)
        # Then depth 0: bit0 = 0, so that parent is the left child of the root.
        root = hash_internal(depth_one, S0)

        verify_membership(root, key, b"value", MembershipProof([S0, S1]))

    def test_two_level_path_sibling_order_matters(self):
        key = find_key(0, 1)
        leaf = hash_leaf(sha256(key), sha256(b"value"))
        proof = MembershipProof([S0, S1])

        for wrong_root in [
            hash_internal(S0, hash_internal(S1, leaf)),
            hash_internal(hash_internal(leaf, S1), S0),
            hash_internal(hash_internal(S0, leaf), S1),
        ]:
            with self.assertRaises(RootHashMismatch):
                verify_membership(wrong_root, key, b"value", proof)

    def test_absent_sibling_hashes_as_zero(self):
        key = find_key(1)
        leaf = hash_leaf(sha256(key), sha256(b"v"))
        root = hash_internal(ZERO_HASH, leaf)

        verify_membership(root, key, b"v", MembershipProof([None]))
        verify_membership(root, key, b"v", MembershipProof([ZERO_HASH]))

    def test_empty_siblings_is_leaf_root(self):
        key_hash, value_hash = sha256(b"k"), sha256(b"v")
        self.assertEqual(compute_root(key_hash, [], hash_leaf(key_hash, value_hash)),
                         hash_leaf(key_hash, value_hash))

    def test_hashed_variant(self):
        key_hash, value_hash = sha256(b"k"), sha256(b"v")
        root = hash_leaf(key_hash, value_hash)
        verify_membership_hashed(root, key_hash, value_hash, MembershipProof())
        with self.assertRaises(RootHashMismatch):
            verify_membership(root, key_hash, value_hash, MembershipProof())

    def test_wrong_proof_type(self):
        proof = NonMembershipProof(node=InternalNode(), sibling_hashes=[])
        with self.assertRaises(IncorrectProofType):
            verify_membership(ZERO_HASH, b"k", b"v", proof)

    def test_wrong_root_length(self):
        root = hash_leaf(sha256(b"k"), sha256(b"v"))
        with self.assertRaises(IncorrectHashLength):
            verify_membership(root[:31], b"k", b"v", MembershipProof())

    def test_repeatable(self):
        root = hash_leaf(sha256(b"k"), sha256(b"v"))
        proof = MembershipProof()
        for _ in range(3):
            verify_membership(root, b"k", b"v", proof)


class TestNonMembership(unittest.TestCase):
    """Test verification of non-membership proofs."""

    def test_internal_witness_without_left_child(self):
        key = find_key(0)
        node = InternalNode(left_hash=None, right_hash=S1)
        root = hash_internal(None, S1)
        self.assertIsNone(verify_non_membership(root, key, NonMembershipProof(node, [])))

    def test_internal_witness_without_right_child(self):
        key = find_key(1)
        node = InternalNode(left_hash=S0, right_hash=None)
        verify_non_membership(hash_internal(S0, None), key, NonMembershipProof(node, []))

    def test_internal_witness_with_child_on_key_side(self):
        key = find_key(0)
        node = InternalNode(left_hash=S0, right_hash=S1)
        with self.assertRaises(UnexpectedChild):
            verify_non_membership(node.hash(), key, NonMembershipProof(node, []))

        key = find_key(1)
        node = InternalNode(left_hash=None, right_hash=S1)
        with self.assertRaises(UnexpectedChild):
            verify_non_membership(node.hash(), key, NonMembershipProof(node, []))

    def test_internal_witness_below_root(self):
        # bit0 = 1 puts the witness on the right of S0; bit1 = 0 must be empty.
        key = find_key(1, 0)
        node = InternalNode(left_hash=None, right_hash=S1)
        root = hash_internal(S0, node.hash())
        verify_non_membership(root, key, NonMembershipProof(node, [S0]))

        other = find_key(1, 1)
        with self.assertRaises(UnexpectedChild):
            verify_non_membership(root, other, NonMembershipProof(node, [S0]))

    def test_leaf_witness_in_single_leaf_tree(self):
        root = hash_leaf(sha256(b"other"), sha256(b"value"))
        proof = NonMembershipProof(LeafNode(sha256(b"other"), sha256(b"value")), [])
        verify_non_membership(root, b"absent", proof)

    def test_leaf_witness_sharing_prefix(self):
        key = find_key(0)
        other = find_key(0, exclude=(key,))
        leaf = LeafNode(sha256(other), sha256(b"v"))
        root = hash_internal(leaf.hash(), S1)
        verify_non_membership(root, key, NonMembershipProof(leaf, [S1]))

    def test_leaf_witness_off_path(self):
        key = find_key(0)
        other = find_key(1)
        leaf = LeafNode(sha256(other), sha256(b"v"))
        # The root matches the witness placement; only the prefix is wrong.
        root = hash_internal(leaf.hash(), S1)
        with self.assertRaises(NotCommonPrefix):
            verify_non_membership(root, key, NonMembershipProof(leaf, [S1]))

    def test_leaf_witness_holding_the_key(self):
        leaf = LeafNode(sha256(b"present"), sha256(b"v"))
        with self.assertRaises(NotCommonPrefix):
            verify_non_membership(leaf.hash(), b"present", NonMembershipProof(leaf, []))

    def test_root_mismatch(self):
        key = find_key(0)
        node = InternalNode(left_hash=None, right_hash=S1)
        with self.assertRaises(RootHashMismatch):
            verify_non_membership(hash_internal(None, S0), key, NonMembershipProof(node, []))

    def test_hashed_variant(self):
        key_hash = sha256(find_key(0))
        node = InternalNode(right_hash=S1)
        verify_non_membership_hashed(node.hash(), key_hash, NonMembershipProof(node, []))

    def test_wrong_proof_type(self):
        with self.assertRaises(IncorrectProofType):
            verify_non_membership(ZERO_HASH, b"k", MembershipProof())


class TestStructuralValidation(unittest.TestCase):
    """Test that malformed proofs are rejected before anything is hashed."""

    def test_not_a_proof(self):
        for value in (None, "proof", {"membership": {}}, [S0]):
            with self.assertRaises(MalformedProof):
                validate_proof(value)
            with self.assertRaises(MalformedProof):
                verify_membership(ZERO_HASH, b"k", b"v", value)

    def test_witness_not_a_node(self):
        proof = NonMembershipProof(node="leaf", sibling_hashes=[])
        with self.assertRaises(MalformedProof):
            verify_non_membership(ZERO_HASH, b"k", proof)

    def test_witness_hash_length(self):
        proof = NonMembershipProof(node=InternalNode(left_hash=b"\x00" * 31), sibling_hashes=[])
        with self.assertRaises(IncorrectHashLength):
            validate_proof(proof)
        proof = NonMembershipProof(node=LeafNode(S0, b"\x01" * 33), sibling_hashes=[])
        with self.assertRaises(IncorrectHashLength):
            validate_proof(proof)

    def test_sibling_hash_length(self):
        with self.assertRaises(IncorrectHashLength):
            validate_proof(MembershipProof([S0, b"\x00" * 31]))

    def test_too_many_siblings(self):
        validate_proof(MembershipProof([None] * 256))
        with self.assertRaises(MalformedProof):
            validate_proof(MembershipProof([None] * 257))
        with self.assertRaises(MalformedProof):
            validate_proof(NonMembershipProof(InternalNode(), [None] * 257))

    def test_internal_witness_at_full_depth(self):
        validate_proof(NonMembershipProof(LeafNode(S0, S1), [None] * 256))
        with self.assertRaises(MalformedProof):
            validate_proof(NonMembershipProof(InternalNode(), [None] * 256))

    def test_nothing_hashed_for_malformed_proof(self):
        proof = MembershipProof([S0, b"short"])
        with mock.patch("grug_proofs.merkle.proof.sha256") as sha, \
                mock.patch("grug_proofs.merkle.proof.hash_leaf") as leaf, \
                mock.patch("grug_proofs.merkle.proof.hash_internal") as internal:
            with self.assertRaises(IncorrectHashLength):
                verify_membership(ZERO_HASH, b"k", b"v", proof)
            sha.assert_not_called()
            leaf.assert_not_called()
            internal.assert_not_called()

    def test_validation_precedes_type_check(self):
        proof = NonMembershipProof(node=object(), sibling_hashes=[])
        with self.assertRaises(MalformedProof):
            verify_membership(ZERO_HASH, b"k", b"v", proof)


class TestTamperSensitivity(unittest.TestCase):
    """Flipping any bit of a valid proof's inputs must fail verification."""

    def setUp(self):
        self.key = find_key(1, 0, 1)
        self.leaf = hash_leaf(sha256(self.key), sha256(b"value"))
        self.siblings = [S0, None, S1]
        self.root = compute_root(sha256(self.key), self.siblings, self.leaf)
        verify_membership(self.root, self.key, b"value", MembershipProof(self.siblings))

    @staticmethod
    def _flip(data: bytes, bit: int) -> bytes:
        buffer = bytearray(data)
        buffer[bit // 8] ^= 1 << (bit % 8)
        return bytes(buffer)

    def test_flipped_sibling_bits(self):
        for index in (0, 2):
            for bit in (0, 7, 128, 255):
                siblings = list(self.siblings)
                siblings[index] = self._flip(siblings[index], bit)
                with self.assertRaises(RootHashMismatch):
                    verify_membership(self.root, self.key, b"value", MembershipProof(siblings))

    def test_filled_absent_sibling(self):
        siblings = [S0, S0, S1]
        with self.assertRaises(RootHashMismatch):
            verify_membership(self.root, self.key, b"value", MembershipProof(siblings))

    def test_flipped_root_bits(self):
        for bit in (0, 100, 255):
            with self.assertRaises(RootHashMismatch):
                verify_membership(self._flip(self.root, bit), self.key, b"value",
                                  MembershipProof(self.siblings))

    def test_other_key_or_value(self):
        with self.assertRaises(GrugProofError):
            verify_membership(self.root, self.key + b"x", b"value", MembershipProof(self.siblings))
        with self.assertRaises(RootHashMismatch):
            verify_membership(self.root, self.key, b"valuf", MembershipProof(self.siblings))

    def test_dropped_or_extra_sibling(self):
        with self.assertRaises(RootHashMismatch):
            verify_membership(self.root, self.key, b"value", MembershipProof(self.siblings[:2]))
        with self.assertRaises(RootHashMismatch):
            verify_membership(self.root, self.key, b"value",
                              MembershipProof(self.siblings + [None]))


class TestNonMembershipTamperSensitivity(unittest.TestCase):
    """Tampering with a valid non-membership proof or its key must fail verification."""

    @classmethod
    def setUpClass(cls):
        cls.tree = MerkleTree({b"key-%d" % i: b"value-%d" % i for i in range(64)})
        cls.root = cls.tree.root_hash
        cls.proofs = {}
        for i in itertools.count():
            key = b"absent-%d" % i
            proof = cls.tree.prove(key)
            kind = type(proof.node)
            if proof.depth >= 1 and kind not in cls.proofs:
                cls.proofs[kind] = (sha256(key), proof)
            if len(cls.proofs) == 2:
                break

    @staticmethod
    def _flip(data: bytes, bit: int) -> bytes:
        buffer = bytearray(data)
        buffer[bit // 8] ^= 1 << (bit % 8)
        return bytes(buffer)

    def assertRejected(self, key_hash, proof):
        with self.assertRaises(GrugProofError) as cm:
            verify_non_membership_hashed(self.root, key_hash, proof)
        self.assertIsInstance(cm.exception, (RootHashMismatch, NotCommonPrefix, UnexpectedChild))

    def test_untampered_proofs_verify(self):
        for key_hash, proof in self.proofs.values():
            verify_non_membership_hashed(self.root, key_hash, proof)

    def test_flipped_internal_witness(self):
        key_hash, proof = self.proofs[InternalNode]
        node = proof.node
        children = [name for name in ("left_hash", "right_hash") if getattr(node, name) is not None]
        self.assertTrue(children)
        for name in children:
            for bit in (0, 9, 255):
                tampered = InternalNode(**{
                    "left_hash": node.left_hash,
                    "right_hash": node.right_hash,
                    name: self._flip(getattr(node, name), bit),
                })
                self.assertRejected(key_hash, NonMembershipProof(tampered, proof.sibling_hashes))

    def test_flipped_leaf_witness(self):
        key_hash, proof = self.proofs[LeafNode]
        node = proof.node
        for bit in (0, 9, 255):
            for tampered in (
                LeafNode(self._flip(node.key_hash, bit), node.value_hash),
                LeafNode(node.key_hash, self._flip(node.value_hash, bit)),
            ):
                self.assertRejected(key_hash, NonMembershipProof(tampered, proof.sibling_hashes))

    def test_flipped_sibling_hashes(self):
        for key_hash, proof in self.proofs.values():
            for depth, sibling in enumerate(proof.sibling_hashes):
                if sibling is None:
                    continue
                siblings = list(proof.sibling_hashes)
                siblings[depth] = self._flip(sibling, depth % 256)
                self.assertRejected(key_hash, NonMembershipProof(proof.node, siblings))

    def test_flipped_key_bits_on_path(self):
        # Bits past the witness don't choose a branch, so only the path bits
        # (and, for an internal witness, the bit it branches on) are flipped.
        for kind, (key_hash, proof) in self.proofs.items():
            last = proof.depth if kind is InternalNode else proof.depth - 1
            for bit in range(last + 1):
                self.assertRejected(self._flip(key_hash, bit), proof)


if __name__ == '__main__':
    unittest.main()
