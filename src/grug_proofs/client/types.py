"""
Light Client Types

Plain value types used by the Grug light client: heights, Merkle paths,
consensus states and the host chain context.
"""

from dataclasses import dataclass, field
from datetime import datetime

CLIENT_TYPE = "xx-grug"


@dataclass(frozen=True, order=True)
class Height:
    """
    A block height, ordered by revision number then revision height.

    Attributes:
        revision_number: Revision (chain upgrade) number
        revision_height: Height within the revision
    """
    revision_number: int = 0
    revision_height: int = 0

    def add(self, blocks: int) -> "Height":
        return Height(self.revision_number, self.revision_height + blocks)

    def __str__(self) -> str:
        return f"{self.revision_number}-{self.revision_height}"


@dataclass(frozen=True)
class Path:
    """Merkle path of a Grug proof: the raw key bytes."""
    key: bytes = b""

    def empty(self) -> bool:
        return len(self.key) == 0


@dataclass(frozen=True)
class ConsensusState:
    """
    Consensus state of the counterparty chain at a height.

    Attributes:
        timestamp: Block time of the header
        root: Root hash of the Grug Merkle tree at that height
        next_validators_hash: Hash of the next validator set
    """
    timestamp: datetime
    root: bytes
    next_validators_hash: bytes = field(default=b"")

    def client_type(self) -> str:
        return CLIENT_TYPE


@dataclass(frozen=True)
class HostContext:
    """
    Current state of the executing chain.

    Attributes:
        block_time_ns: Current block time, in nanoseconds since the epoch
        height: Current block height
    """
    block_time_ns: int
    height: Height
