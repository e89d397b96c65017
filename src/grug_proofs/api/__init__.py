"""
Verification API Package

This package exposes the Grug proof verifier as a service. It includes:

- VerificationService: decodes inputs and verifies proofs
- rest_api: FastAPI application serving the verification endpoints

Usage:
    from grug_proofs.api import VerificationService

    service = VerificationService()
    result = service.verify_non_membership(root_b64, key_b64, proof_json)
"""

from .verification_service import VerificationResult, VerificationService, VerificationServiceError

__all__ = [
    'VerificationResult',
    'VerificationService',
    'VerificationServiceError',
]
