"""
Proof Wire Models

Pydantic models for the JSON encoding of Grug proofs:

    {"membership": {"sibling_hashes": [<base64> | null, ...]}}
    {"non_membership": {"proof_node": <node>, "sibling_hashes": [...]}}

    {"internal": {"left_hash": <base64>, "right_hash": <base64>}}
    {"leaf": {"key_hash": <base64>, "value_hash": <base64>}}

The wire format encodes each union as an object with one optional field per
variant, so untrusted input can carry zero or both variants. The models
accept that shape and `to_node()` / `to_proof()` reject it with
MalformedProof while converting into the closed types of
`grug_proofs.merkle`.
"""

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import MalformedProof
from ..merkle.hashing import digest_from_base64, digest_to_base64
from ..merkle.node import InternalNode, LeafNode, Node
from ..merkle.proof import MembershipProof, NonMembershipProof, Proof


def _decode_optional(value: Optional[str]):
    return digest_from_base64(value) if value is not None else None


def _decode_siblings(values: List[Optional[str]]):
    return tuple(_decode_optional(value) for value in values)


def _encode_siblings(sibling_hashes) -> List[Optional[str]]:
    return [digest_to_base64(h) if h is not None else None for h in sibling_hashes]


class InternalNodeModel(BaseModel):
    """Internal node; a missing or null child hash means there is no child."""
    left_hash: Optional[str] = Field(default=None, description="Left child hash (base64)")
    right_hash: Optional[str] = Field(default=None, description="Right child hash (base64)")

    def to_node(self) -> InternalNode:
        return InternalNode(
            left_hash=_decode_optional(self.left_hash),
            right_hash=_decode_optional(self.right_hash),
        )


class LeafNodeModel(BaseModel):
    key_hash: str = Field(..., description="Key hash (base64)")
    value_hash: str = Field(..., description="Value hash (base64)")

    def to_node(self) -> LeafNode:
        return LeafNode(
            key_hash=digest_from_base64(self.key_hash),
            value_hash=digest_from_base64(self.value_hash),
        )


class NodeModel(BaseModel):
    """
    A node of the Grug Merkle tree as it appears on the wire.

    Attributes:
        internal: Set if the node is an internal node
        leaf: Set if the node is a leaf node
    """
    internal: Optional[InternalNodeModel] = None
    leaf: Optional[LeafNodeModel] = None

    def to_node(self) -> Node:
        # One and only one of the variants must be set.
        if (self.internal is None) == (self.leaf is None):
            raise MalformedProof("malformed proof: node must be exactly one of internal or leaf")
        if self.internal is not None:
            return self.internal.to_node()
        return self.leaf.to_node()

    @classmethod
    def from_node(cls, node: Node) -> "NodeModel":
        if isinstance(node, InternalNode):
            return cls(internal=InternalNodeModel(
                left_hash=digest_to_base64(node.left_hash) if node.left_hash is not None else None,
                right_hash=digest_to_base64(node.right_hash) if node.right_hash is not None else None,
            ))
        return cls(leaf=LeafNodeModel(
            key_hash=digest_to_base64(node.key_hash),
            value_hash=digest_to_base64(node.value_hash),
        ))


class MembershipProofModel(BaseModel):
    sibling_hashes: List[Optional[str]] = Field(default_factory=list)

    @field_validator("sibling_hashes", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class NonMembershipProofModel(BaseModel):
    proof_node: NodeModel
    sibling_hashes: List[Optional[str]] = Field(default_factory=list)

    @field_validator("sibling_hashes", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class ProofModel(BaseModel):
    """
    A Grug Merkle proof as it appears on the wire.

    Attributes:
        membership: Set for a proof that a key exists
        non_membership: Set for a proof that a key doesn't exist
    """
    membership: Optional[MembershipProofModel] = None
    non_membership: Optional[NonMembershipProofModel] = None

    def to_proof(self) -> Proof:
        # One and only one of the variants must be set.
        if (self.membership is None) == (self.non_membership is None):
            raise MalformedProof(
                "malformed proof: proof must be exactly one of membership or non_membership"
            )
        if self.membership is not None:
            return MembershipProof(
                sibling_hashes=_decode_siblings(self.membership.sibling_hashes),
            )
        return NonMembershipProof(
            node=self.non_membership.proof_node.to_node(),
            sibling_hashes=_decode_siblings(self.non_membership.sibling_hashes),
        )

    @classmethod
    def from_proof(cls, proof: Proof) -> "ProofModel":
        if isinstance(proof, MembershipProof):
            return cls(membership=MembershipProofModel(
                sibling_hashes=_encode_siblings(proof.sibling_hashes),
            ))
        return cls(non_membership=NonMembershipProofModel(
            proof_node=NodeModel.from_node(proof.node),
            sibling_hashes=_encode_siblings(proof.sibling_hashes),
        ))


def decode_proof(data: Union[bytes, str, Dict[str, Any]]) -> Proof:
    """
    Decode a JSON proof into a Proof.

    Args:
        data: JSON text, JSON bytes, or an already parsed JSON object

    Returns:
        MembershipProof or NonMembershipProof

    Raises:
        MalformedProof: If the data is not a well-formed proof
        IncorrectHashLength: If a hash doesn't decode to 32 bytes
    """
    if isinstance(data, (bytes, bytearray, str)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise MalformedProof(f"malformed proof: invalid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedProof(f"malformed proof: expected a JSON object, got {type(data).__name__}")

    try:
        model = ProofModel.model_validate(data)
    except ValidationError as e:
        raise MalformedProof(f"malformed proof: {e.error_count()} invalid field(s): {e}")
    return model.to_proof()


def encode_proof(proof: Proof) -> Dict[str, Any]:
    """Encode a proof as a JSON-compatible dict, omitting absent child hashes."""
    dumped = ProofModel.from_proof(proof).model_dump(exclude_none=True)
    # Absent siblings stay as explicit nulls: their position is their depth.
    body = dumped.get("membership") or dumped["non_membership"]
    body["sibling_hashes"] = _encode_siblings(proof.sibling_hashes)
    return dumped


def proof_to_json(proof: Proof, indent: Optional[int] = None) -> str:
    return json.dumps(encode_proof(proof), indent=indent)
