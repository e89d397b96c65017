"""
API Models

This module defines Pydantic models for API request and response validation.
These models ensure proper data structure and type validation for the
verification API.
"""

import base64
import binascii
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_base64(v: str) -> str:
    try:
        base64.b64decode(v, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Must be a standard base64 string")
    return v


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service status
        version: Service version
        timestamp: Response timestamp
    """
    status: str = Field(..., description="Service status")
    version: str = Field(default="0.1.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class NonMembershipRequest(BaseModel):
    """
    Request model for non-membership verification.

    Attributes:
        root: Trusted root hash (base64, 32 bytes)
        key: Raw key bytes (base64)
        proof: Proof as its JSON object
    """
    root: str = Field(..., description="Trusted root hash (base64, 32 bytes)")
    key: str = Field(..., description="Raw key bytes (base64)")
    proof: Dict[str, Any] = Field(..., description="Grug proof JSON object")

    @field_validator("root", "key")
    @classmethod
    def validate_base64(cls, v):
        """Validate fields are standard base64."""
        return _check_base64(v)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "root": "q2wVlO6j2fbDhcVeCY3dhtvVn23TlUeq1+RqYX2Rphw=",
            "key": "Zm9v",
            "proof": {
                "non_membership": {
                    "proof_node": {"internal": {"right_hash": "p3JtG7mVbX5bMyiR0N3T0Kj1sM2kVXK1Yy4oVq0m5rE="}},
                    "sibling_hashes": [None],
                }
            },
        }
    })


class MembershipRequest(NonMembershipRequest):
    """
    Request model for membership verification.

    Attributes:
        value: Raw value bytes (base64)
    """
    value: str = Field(..., description="Raw value bytes (base64)")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v):
        return _check_base64(v)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "root": "q2wVlO6j2fbDhcVeCY3dhtvVn23TlUeq1+RqYX2Rphw=",
            "key": "Zm9v",
            "value": "YmFy",
            "proof": {"membership": {"sibling_hashes": []}},
        }
    })


class VerificationResponse(BaseModel):
    """
    Response model for a verification.

    A proof that fails verification is a normal result, not an API error:
    `valid` is False and the error fields say why.

    Attributes:
        valid: Whether the proof verified against the root
        error: Error message when invalid
        error_type: Error kind, e.g. "RootHashMismatch"
        code: Registered error code of the error kind
    """
    valid: bool = Field(..., description="Whether the proof is valid")
    error: Optional[str] = Field(default=None, description="Failure reason")
    error_type: Optional[str] = Field(default=None, description="Failure kind")
    code: Optional[int] = Field(default=None, description="Failure code")
