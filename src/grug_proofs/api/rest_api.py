"""
REST API for Grug Proofs

This module provides a FastAPI-based REST API for verifying Grug Merkle
proofs with full OpenAPI documentation.
"""

import logging
import traceback

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, setup_logging
from ..models.api_models import (
    ErrorResponse,
    HealthResponse,
    MembershipRequest,
    NonMembershipRequest,
    VerificationResponse,
)
from .verification_service import VerificationService, VerificationServiceError

logger = logging.getLogger(__name__)

settings = Settings.from_env()

# Initialize FastAPI app
app = FastAPI(
    title="Grug Proofs API",
    description="""
    Verify Merkle proofs of the Grug state tree.

    Grug stores SHA-256 hashes of keys and values in a binary Merkle tree
    indexed by the bits of the key hash. A membership proof shows that a key
    holds a value under a root hash; a non-membership proof shows that a key
    is absent.

    ## Encoding
    - Root hashes, keys and values are standard base64
    - Proofs are the JSON objects produced by Grug nodes, e.g.
      `{"membership": {"sibling_hashes": [...]}}`

    ## Results
    A proof that doesn't verify is a normal response with `valid: false` and
    the reason (`RootHashMismatch`, `UnexpectedChild`, ...). Malformed
    requests are rejected with an error response.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_verification_service() -> VerificationService:
    """Dependency to get the verification service."""
    return VerificationService()


@app.exception_handler(VerificationServiceError)
async def verification_service_error_handler(request, exc: VerificationServiceError):
    """Handle undecodable inputs."""
    logger.error(f"Verification input error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="VALIDATION_ERROR",
            details={"error_type": "VerificationServiceError"}
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Grug Proofs API",
        "version": __version__,
        "description": "Verify Merkle proofs of the Grug state tree",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/verify/membership", response_model=VerificationResponse)
async def verify_membership_endpoint(
    request: MembershipRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify that a key exists with a value under a root hash.

    **Request:**
    - `root`: trusted root hash (base64)
    - `key`, `value`: raw key and value bytes (base64)
    - `proof`: membership proof JSON object
    """
    result = service.verify_membership(request.root, request.key, request.value, request.proof)
    return VerificationResponse(**result.to_dict())


@app.post("/verify/non-membership", response_model=VerificationResponse)
async def verify_non_membership_endpoint(
    request: NonMembershipRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify that a key is absent under a root hash.

    **Request:**
    - `root`: trusted root hash (base64)
    - `key`: raw key bytes (base64)
    - `proof`: non-membership proof JSON object
    """
    result = service.verify_non_membership(request.root, request.key, request.proof)
    return VerificationResponse(**result.to_dict())


def run_server(host: str = None, port: int = None, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to (defaults to GRUG_PROOFS_HOST)
        port: Port to bind to (defaults to GRUG_PROOFS_PORT)
        dev: Enable development mode with auto-reload
    """
    setup_logging(level=settings.log_level)
    host = host or settings.host
    port = port or settings.port
    logger.info(f"Starting Grug Proofs API server on {host}:{port}")
    uvicorn.run(
        "grug_proofs.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run_server(dev=True)
