"""
Client commands for RelayChat

A Command is an immutable value tagged with its Verb. Only the fields
that belong to the verb are set; the rest stay None.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from enum import Enum


class Verb(Enum):
    """Command verbs as they appear on the wire"""
    NICK = "NICK"
    CREATE = "CREATE"
    JOIN = "JOIN"
    MESG = "MESG"
    LEAVE = "LEAVE"
    INVITE = "INVITE"
    KICK = "KICK"


# Payload fields each verb must carry
REQUIRED_FIELDS: Dict[Verb, Tuple[str, ...]] = {
    Verb.NICK: ('new_nickname',),
    Verb.CREATE: ('channel',),
    Verb.JOIN: ('channel',),
    Verb.MESG: ('channel', 'message'),
    Verb.LEAVE: ('channel',),
    Verb.INVITE: ('channel', 'target'),
    Verb.KICK: ('channel', 'target'),
}


@dataclass(frozen=True)
class Command:
    """A parsed client command, consumed once by the server model"""
    sender_id: int
    sender: str  # nickname at the time the command was issued
    verb: Verb
    channel: Optional[str] = None
    target: Optional[str] = None  # nickname to invite or kick
    new_nickname: Optional[str] = None
    message: Optional[str] = None
    invite_only: bool = False

    def __post_init__(self):
        missing = [name for name in REQUIRED_FIELDS[self.verb]
                   if getattr(self, name) is None]
        if missing:
            raise ValueError(
                f"{self.verb.value} command missing field(s): {', '.join(missing)}"
            )

    # Constructors, one per verb

    @classmethod
    def nick(cls, sender_id: int, sender: str, new_nickname: str) -> 'Command':
        return cls(sender_id, sender, Verb.NICK, new_nickname=new_nickname)

    @classmethod
    def create(cls, sender_id: int, sender: str, channel: str,
               invite_only: bool = False) -> 'Command':
        return cls(sender_id, sender, Verb.CREATE, channel=channel,
                   invite_only=invite_only)

    @classmethod
    def join(cls, sender_id: int, sender: str, channel: str) -> 'Command':
        return cls(sender_id, sender, Verb.JOIN, channel=channel)

    @classmethod
    def mesg(cls, sender_id: int, sender: str, channel: str, message: str) -> 'Command':
        return cls(sender_id, sender, Verb.MESG, channel=channel, message=message)

    @classmethod
    def leave(cls, sender_id: int, sender: str, channel: str) -> 'Command':
        return cls(sender_id, sender, Verb.LEAVE, channel=channel)

    @classmethod
    def invite(cls, sender_id: int, sender: str, channel: str, target: str) -> 'Command':
        return cls(sender_id, sender, Verb.INVITE, channel=channel, target=target)

    @classmethod
    def kick(cls, sender_id: int, sender: str, channel: str, target: str) -> 'Command':
        return cls(sender_id, sender, Verb.KICK, channel=channel, target=target)

    def __str__(self) -> str:
        """Render the command in its wire form, ':<sender> <VERB> <args>'"""
        prefix = f":{self.sender} {self.verb.value}"
        if self.verb is Verb.NICK:
            return f"{prefix} {self.new_nickname}"
        if self.verb is Verb.CREATE:
            return f"{prefix} {self.channel} {1 if self.invite_only else 0}"
        if self.verb is Verb.MESG:
            return f"{prefix} {self.channel} :{self.message}"
        if self.verb in (Verb.INVITE, Verb.KICK):
            return f"{prefix} {self.channel} {self.target}"
        return f"{prefix} {self.channel}"
