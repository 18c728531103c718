"""
Data Models for RelayChat Server

Plain records for users and channels plus the error kinds
reported by every model operation.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum


class ServerError(Enum):
    """Outcome of a model operation; OKAY is the only success value"""
    OKAY = 200
    INVALID_NAME = 401
    NO_SUCH_USER = 402
    NO_SUCH_CHANNEL = 403
    USER_NOT_IN_CHANNEL = 404
    USER_NOT_OWNER = 405
    JOIN_PRIVATE_CHANNEL = 406
    INVITE_TO_PUBLIC_CHANNEL = 407
    NAME_ALREADY_IN_USE = 500
    CHANNEL_ALREADY_EXISTS = 501

    @property
    def code(self) -> int:
        """Numeric code used on the wire"""
        return self.value

    def is_okay(self) -> bool:
        return self is ServerError.OKAY


class Visibility(Enum):
    """Channel visibility"""
    PUBLIC = "public"
    PRIVATE = "private"  # invite-only

    @classmethod
    def from_invite_only(cls, invite_only: bool) -> 'Visibility':
        return cls.PRIVATE if invite_only else cls.PUBLIC


@dataclass
class User:
    """Represents a registered connection and its nickname"""
    connection_id: int
    nickname: str


@dataclass
class Channel:
    """
    Represents a chat channel

    The owner is kept as a connection id so that renaming the owner
    never detaches them from the channel; the owner nickname is read
    back from the membership map.
    """
    name: str
    owner_id: int
    visibility: Visibility = Visibility.PUBLIC
    members: Dict[int, str] = field(default_factory=dict)  # connection_id -> nickname

    @property
    def owner(self) -> Optional[str]:
        """Nickname of the channel owner"""
        return self.members.get(self.owner_id)

    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    def is_owner(self, nickname: str) -> bool:
        """Check if nickname is the channel owner"""
        return self.owner == nickname

    def add_member(self, connection_id: int, nickname: str):
        """Add a member to the channel"""
        self.members[connection_id] = nickname

    def remove_member(self, connection_id: int):
        """Remove a member from the channel"""
        self.members.pop(connection_id, None)

    def has_member(self, connection_id: int) -> bool:
        return connection_id in self.members

    def member_nicknames(self) -> List[str]:
        """Sorted copy of the member nicknames"""
        return sorted(self.members.values())

    def member_count(self) -> int:
        """Get number of members"""
        return len(self.members)
