"""
Broadcast values for RelayChat

A Broadcast describes who must be told about the outcome of one
command and what they are told. Recipients are stored as a sorted,
de-duplicated tuple, so a Broadcast never changes after it is built.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from enum import Enum

from commands import Command
from models import ServerError


class BroadcastType(Enum):
    """Kind of notification"""
    ERROR = "error"
    OKAY = "okay"
    NAMES = "names"  # membership listing after JOIN / INVITE
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


def _snapshot(nicknames: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted(set(nicknames)))


@dataclass(frozen=True)
class Broadcast:
    """Immutable result of processing one command"""
    broadcast_type: BroadcastType
    recipients: Tuple[str, ...]
    command: Optional[Command] = None
    error: Optional[ServerError] = None
    owner: Optional[str] = None
    nickname: Optional[str] = None  # subject of CONNECTED / DISCONNECTED

    @classmethod
    def error_for(cls, command: Command, error: ServerError) -> 'Broadcast':
        """Error addressed only to the command's sender"""
        if error is ServerError.OKAY:
            raise ValueError("OKAY is not an error")
        return cls(BroadcastType.ERROR, (command.sender,), command=command, error=error)

    @classmethod
    def okay(cls, command: Command, recipients: Iterable[str]) -> 'Broadcast':
        return cls(BroadcastType.OKAY, _snapshot(recipients), command=command)

    @classmethod
    def names(cls, command: Command, recipients: Iterable[str], owner: str) -> 'Broadcast':
        return cls(BroadcastType.NAMES, _snapshot(recipients), command=command, owner=owner)

    @classmethod
    def connected(cls, nickname: str) -> 'Broadcast':
        return cls(BroadcastType.CONNECTED, (nickname,), nickname=nickname)

    @classmethod
    def disconnected(cls, nickname: str, recipients: Iterable[str]) -> 'Broadcast':
        others = set(recipients)
        others.discard(nickname)
        return cls(BroadcastType.DISCONNECTED, _snapshot(others), nickname=nickname)

    def is_error(self) -> bool:
        return self.broadcast_type is BroadcastType.ERROR

    def get_recipients(self) -> List[str]:
        """Recipient nicknames, sorted"""
        return list(self.recipients)
