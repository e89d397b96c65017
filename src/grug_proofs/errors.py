"""
Grug Proof Errors

This module defines the error taxonomy for Grug Merkle proof verification
and for the light client wrapper around it.

All verification failures are synchronous and typed. The proof errors carry
the codespace and code they are registered under on chain, so they can be
reported back to a host chain unchanged.
"""

CODESPACE = "xx-grug"


class GrugProofError(Exception):
    """Base class for all proof verification errors."""

    code = 1
    default_message = "grug proof error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.codespace = CODESPACE

    @property
    def name(self) -> str:
        return type(self).__name__


class IncorrectHashLength(GrugProofError):
    code = 2
    default_message = "incorrect hash length"


class MalformedProof(GrugProofError):
    code = 3
    default_message = "malformed proof"


class IncorrectProofType(GrugProofError):
    code = 4
    default_message = "incorrect proof type"


class UnexpectedChild(GrugProofError):
    code = 5
    default_message = (
        "invalid non-membership proof: expecting node to not have a child, but it has one"
    )


class NotCommonPrefix(GrugProofError):
    code = 6
    default_message = (
        "invalid non-membership proof: node doesn't have a common bit prefix with the key"
    )


class RootHashMismatch(GrugProofError):
    code = 7
    default_message = "computed root hash doesn't match the actual"


class LightClientError(Exception):
    """Exception raised by the light client before a proof is verified."""
    pass


class InvalidHeight(LightClientError):
    pass


class DelayPeriodNotPassed(LightClientError):
    pass


class ProcessedTimeNotFound(LightClientError):
    pass


class ProcessedHeightNotFound(LightClientError):
    pass


class ConsensusStateNotFound(LightClientError):
    pass


class InvalidProof(LightClientError):
    """Proof bytes could not be decoded into a Grug proof."""
    pass


class InvalidType(LightClientError):
    pass
