"""
Client Store

Read access to what the host chain recorded for a light client: consensus
states, and when (time and height) each one was processed.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from .types import ConsensusState, Height


class ClientStore(ABC):
    """Storage of a light client, keyed by counterparty height."""

    @abstractmethod
    def get_consensus_state(self, height: Height) -> Optional[ConsensusState]:
        """Consensus state stored at `height`, or None."""

    @abstractmethod
    def get_processed_time(self, height: Height) -> Optional[int]:
        """Host block time (ns) at which the state at `height` was stored, or None."""

    @abstractmethod
    def get_processed_height(self, height: Height) -> Optional[Height]:
        """Host height at which the state at `height` was stored, or None."""


class InMemoryClientStore(ClientStore):
    """Dictionary-backed ClientStore."""

    def __init__(self):
        self._consensus_states: Dict[Height, ConsensusState] = {}
        self._processed_times: Dict[Height, int] = {}
        self._processed_heights: Dict[Height, Height] = {}

    def set_consensus_state(
        self,
        height: Height,
        consensus_state: ConsensusState,
        processed_time: Optional[int] = None,
        processed_height: Optional[Height] = None,
    ) -> None:
        """
        Store a consensus state and, optionally, when it was processed.

        Args:
            height: Counterparty height of the consensus state
            consensus_state: The consensus state
            processed_time: Host block time (ns) when it was stored
            processed_height: Host height when it was stored
        """
        self._consensus_states[height] = consensus_state
        if processed_time is not None:
            self._processed_times[height] = processed_time
        if processed_height is not None:
            self._processed_heights[height] = processed_height

    def get_consensus_state(self, height: Height) -> Optional[ConsensusState]:
        return self._consensus_states.get(height)

    def get_processed_time(self, height: Height) -> Optional[int]:
        return self._processed_times.get(height)

    def get_processed_height(self, height: Height) -> Optional[Height]:
        return self._processed_heights.get(height)
