"""
Verification Service Module

This module provides a service layer over the Grug proof verifier, used by
both the REST API and the CLI. It decodes the caller's inputs, runs the
verification and reports the outcome as a VerificationResult.
"""

import base64
import binascii
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

from ..errors import GrugProofError
from ..merkle.hashing import digest_from_base64
from ..merkle.proof import verify_membership, verify_non_membership
from ..models.proof_models import decode_proof

logger = logging.getLogger(__name__)

ProofInput = Union[bytes, str, Dict[str, Any]]


class VerificationServiceError(Exception):
    """Custom exception for invalid verification inputs."""
    pass


@dataclass
class VerificationResult:
    """Outcome of a verification."""
    valid: bool
    error: Optional[str] = None
    error_type: Optional[str] = None
    code: Optional[int] = None

    @classmethod
    def failure(cls, exc: GrugProofError) -> "VerificationResult":
        return cls(valid=False, error=str(exc), error_type=exc.name, code=exc.code)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class VerificationService:
    """Service for verifying Grug membership and non-membership proofs."""

    def decode_root(self, root: Union[str, bytes]) -> bytes:
        """
        Decode the trusted root hash.

        Args:
            root: 32 raw bytes, or their standard base64 encoding

        Raises:
            VerificationServiceError: If the root is not a 32-byte hash
        """
        try:
            if isinstance(root, str):
                return digest_from_base64(root)
            if len(root) != 32:
                raise VerificationServiceError(f"Root hash must be 32 bytes, got {len(root)}")
            return bytes(root)
        except GrugProofError as e:
            raise VerificationServiceError(f"Invalid root hash: {e}")

    def decode_bytes(self, value: Union[str, bytes], field_name: str) -> bytes:
        """Decode a base64 key or value; raw bytes are passed through."""
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise VerificationServiceError(f"Invalid base64 for {field_name}: {e}")

    def verify_membership(
        self,
        root: Union[str, bytes],
        key: Union[str, bytes],
        value: Union[str, bytes],
        proof: ProofInput,
    ) -> VerificationResult:
        """
        Verify that `key` exists with `value` under `root`.

        Args:
            root: Trusted root hash (32 bytes or base64)
            key: Raw key (bytes or base64)
            value: Raw value (bytes or base64)
            proof: Proof as JSON text, JSON bytes or parsed object

        Returns:
            VerificationResult; a failed verification is not an exception

        Raises:
            VerificationServiceError: If root, key or value can't be decoded
        """
        root_hash = self.decode_root(root)
        key_bytes = self.decode_bytes(key, "key")
        value_bytes = self.decode_bytes(value, "value")

        try:
            verify_membership(root_hash, key_bytes, value_bytes, decode_proof(proof))
        except GrugProofError as e:
            logger.info(f"Membership proof rejected for key {key_bytes!r}: {e.name}: {e}")
            return VerificationResult.failure(e)

        logger.info(f"Membership proof verified for key {key_bytes!r}")
        return VerificationResult(valid=True)

    def verify_non_membership(
        self,
        root: Union[str, bytes],
        key: Union[str, bytes],
        proof: ProofInput,
    ) -> VerificationResult:
        """Verify that `key` doesn't exist under `root`. See `verify_membership`."""
        root_hash = self.decode_root(root)
        key_bytes = self.decode_bytes(key, "key")

        try:
            verify_non_membership(root_hash, key_bytes, decode_proof(proof))
        except GrugProofError as e:
            logger.info(f"Non-membership proof rejected for key {key_bytes!r}: {e.name}: {e}")
            return VerificationResult.failure(e)

        logger.info(f"Non-membership proof verified for key {key_bytes!r}")
        return VerificationResult(valid=True)
