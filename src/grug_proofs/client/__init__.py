"""
Grug Light Client Package

Light client wrapper that verifies Grug proofs against consensus state
roots, after the height and delay period checks of the host chain.

Usage:
    from grug_proofs.client import Height, Path, new_client_state

    client = new_client_state("grug-1", Height(0, 100))
    client.verify_membership(ctx, store, Height(0, 100), 0, 0, proof, Path(key), value)
"""

from .client_state import (
    ClientState,
    GenericClientState,
    LightClient,
    new_client_state,
    verify_delay_period_passed,
)
from .store import ClientStore, InMemoryClientStore
from .types import CLIENT_TYPE, ConsensusState, Height, HostContext, Path

__all__ = [
    'CLIENT_TYPE',
    'ClientState',
    'ClientStore',
    'ConsensusState',
    'GenericClientState',
    'Height',
    'HostContext',
    'InMemoryClientStore',
    'LightClient',
    'Path',
    'new_client_state',
    'verify_delay_period_passed',
]
