"""
Grug Light Client

The Grug light client is a generic consensus light client with its proof
verification swapped out: instead of ICS-23 proofs in Protobuf, it verifies
Grug Merkle proofs in JSON against the root stored in the consensus state.

`ClientState` wraps a base `LightClient` and forwards everything to it,
except the three methods it overrides: `client_type`, `verify_membership`
and `verify_non_membership`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, List, Tuple

from ..errors import (
    ConsensusStateNotFound,
    DelayPeriodNotPassed,
    GrugProofError,
    InvalidHeight,
    InvalidProof,
    InvalidType,
    ProcessedHeightNotFound,
    ProcessedTimeNotFound,
)
from ..merkle.proof import Proof, verify_membership, verify_non_membership
from ..models.proof_models import decode_proof
from .store import ClientStore
from .types import CLIENT_TYPE, ConsensusState, Height, HostContext, Path

logger = logging.getLogger(__name__)


class LightClient(ABC):
    """Interface of a light client able to verify counterparty state."""

    @abstractmethod
    def client_type(self) -> str:
        pass

    @abstractmethod
    def get_latest_height(self) -> Height:
        pass

    @abstractmethod
    def verify_membership(
        self,
        ctx: HostContext,
        store: ClientStore,
        height: Height,
        delay_time_period: int,
        delay_block_period: int,
        proof: bytes,
        path: Any,
        value: bytes,
    ) -> None:
        pass

    @abstractmethod
    def verify_non_membership(
        self,
        ctx: HostContext,
        store: ClientStore,
        height: Height,
        delay_time_period: int,
        delay_block_period: int,
        proof: bytes,
        path: Any,
    ) -> None:
        pass


@dataclass
class GenericClientState(LightClient):
    """
    Parameters and latest height of a generic consensus light client.

    This is the base a `ClientState` delegates to. It tracks the counterparty
    chain but has no proof format of its own.
    """
    chain_id: str
    latest_height: Height
    trust_level: Tuple[int, int] = (1, 3)
    trusting_period: timedelta = timedelta(days=14)
    unbonding_period: timedelta = timedelta(days=21)
    max_clock_drift: timedelta = timedelta(seconds=10)
    upgrade_path: List[str] = field(default_factory=list)

    def client_type(self) -> str:
        return "generic"

    def get_latest_height(self) -> Height:
        return self.latest_height

    def update_latest_height(self, height: Height) -> None:
        """Advance the latest height; lower heights are ignored."""
        if height > self.latest_height:
            self.latest_height = height

    def verify_membership(self, ctx, store, height, delay_time_period, delay_block_period, proof, path, value):
        raise InvalidProof("generic client state has no proof format")

    def verify_non_membership(self, ctx, store, height, delay_time_period, delay_block_period, proof, path):
        raise InvalidProof("generic client state has no proof format")


class ClientState(LightClient):
    """
    Client state of a Grug chain.

    Delegates to `base` for everything but proof verification.
    """

    def __init__(self, base: LightClient):
        self.base = base

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes ClientState doesn't define itself.
        if name == "base":
            raise AttributeError(name)
        return getattr(self.base, name)

    def client_type(self) -> str:
        return CLIENT_TYPE

    def get_latest_height(self) -> Height:
        return self.base.get_latest_height()

    def verify_membership(
        self,
        ctx: HostContext,
        store: ClientStore,
        height: Height,
        delay_time_period: int,
        delay_block_period: int,
        proof: bytes,
        path: Any,
        value: bytes,
    ) -> None:
        """
        Verify that `path` holds `value` on the counterparty chain at `height`.

        Args:
            ctx: Current state of the executing chain
            store: Store of this client
            height: Counterparty height the proof was built against
            delay_time_period: Required delay since processing, in ns (0 for none)
            delay_block_period: Required delay since processing, in blocks (0 for none)
            proof: JSON-encoded Grug proof
            path: Path of the key
            value: Raw value bytes

        Raises:
            LightClientError: If the height, delay, proof encoding, path type
                or consensus state check fails
            GrugProofError: If the proof doesn't verify
        """
        merkle_proof, merkle_path, consensus_state = self._prepare(
            ctx, store, height, delay_time_period, delay_block_period, proof, path
        )
        verify_membership(consensus_state.root, merkle_path.key, value, merkle_proof)
        logger.debug(f"Verified membership of {merkle_path.key.hex()} at height {height}")

    def verify_non_membership(
        self,
        ctx: HostContext,
        store: ClientStore,
        height: Height,
        delay_time_period: int,
        delay_block_period: int,
        proof: bytes,
        path: Any,
    ) -> None:
        """Verify that `path` is absent on the counterparty chain at `height`."""
        merkle_proof, merkle_path, consensus_state = self._prepare(
            ctx, store, height, delay_time_period, delay_block_period, proof, path
        )
        verify_non_membership(consensus_state.root, merkle_path.key, merkle_proof)
        logger.debug(f"Verified non-membership of {merkle_path.key.hex()} at height {height}")

    def _prepare(
        self, ctx, store, height, delay_time_period, delay_block_period, proof, path
    ) -> Tuple[Proof, Path, ConsensusState]:
        latest_height = self.get_latest_height()
        if latest_height < height:
            raise InvalidHeight(
                f"client state height < proof height ({latest_height} < {height}), "
                f"please ensure the client has been updated"
            )

        verify_delay_period_passed(ctx, store, height, delay_time_period, delay_block_period)

        # Unlike the generic client, proofs are Grug proofs in JSON.
        try:
            merkle_proof = decode_proof(proof)
        except GrugProofError as e:
            raise InvalidProof(f"failed to unmarshal proof into Grug proof: {e}") from e

        if not isinstance(path, Path):
            raise InvalidType(f"expected {Path.__name__}, got {type(path).__name__}")

        consensus_state = store.get_consensus_state(height)
        if consensus_state is None:
            raise ConsensusStateNotFound(
                "please ensure the proof was constructed against a height that exists on the client"
            )

        return merkle_proof, path, consensus_state


def verify_delay_period_passed(
    ctx: HostContext,
    store: ClientStore,
    proof_height: Height,
    delay_time_period: int,
    delay_block_period: int,
) -> None:
    """
    Check that the delay periods have passed since the consensus state at
    `proof_height` was processed. Both delays are inclusive.

    Raises:
        ProcessedTimeNotFound: If a time delay is set and no processed time is stored
        ProcessedHeightNotFound: If a block delay is set and no processed height is stored
        DelayPeriodNotPassed: If either delay hasn't passed yet
    """
    if delay_time_period != 0:
        processed_time = store.get_processed_time(proof_height)
        if processed_time is None:
            raise ProcessedTimeNotFound(f"processed time not found for height: {proof_height}")

        valid_time = processed_time + delay_time_period
        if ctx.block_time_ns < valid_time:
            raise DelayPeriodNotPassed(
                f"cannot verify packet until time: {valid_time}, current time: {ctx.block_time_ns}"
            )

    if delay_block_period != 0:
        processed_height = store.get_processed_height(proof_height)
        if processed_height is None:
            raise ProcessedHeightNotFound(f"processed height not found for height: {proof_height}")

        valid_height = processed_height.add(delay_block_period)
        if ctx.height < valid_height:
            raise DelayPeriodNotPassed(
                f"cannot verify packet until height: {valid_height}, current height: {ctx.height}"
            )


def new_client_state(
    chain_id: str,
    latest_height: Height,
    trust_level: Tuple[int, int] = (1, 3),
    trusting_period: timedelta = timedelta(days=14),
    unbonding_period: timedelta = timedelta(days=21),
    max_clock_drift: timedelta = timedelta(seconds=10),
    upgrade_path: List[str] = None,
) -> ClientState:
    """Create a Grug client state over a generic client with these parameters."""
    return ClientState(GenericClientState(
        chain_id=chain_id,
        latest_height=latest_height,
        trust_level=trust_level,
        trusting_period=trusting_period,
        unbonding_period=unbonding_period,
        max_clock_drift=max_clock_drift,
        upgrade_path=list(upgrade_path or []),
    ))
