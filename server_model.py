"""
RelayChat Server Model

The state machine behind the server: owns the user and channel
registries, applies one command at a time and describes who has to be
told about it. Nothing in here blocks or locks; callers serialize
access (see server.py).
"""

import logging
from typing import Callable, Dict, List, Optional

from broadcast import Broadcast
from channel_registry import ChannelRegistry
from commands import Command, Verb
from input_validator import is_valid_name
from models import ServerError, Visibility
from user_registry import UserRegistry


logger = logging.getLogger(__name__)


class ServerModel:
    """Tracks users and channels and turns commands into Broadcasts"""

    def __init__(self):
        self.users = UserRegistry()
        self.channels = ChannelRegistry(self.users)

        self._handlers: Dict[Verb, Callable[[Command], Broadcast]] = {
            Verb.NICK: self._handle_nick,
            Verb.CREATE: self._handle_create,
            Verb.JOIN: self._handle_join,
            Verb.MESG: self._handle_mesg,
            Verb.LEAVE: self._handle_leave,
            Verb.INVITE: self._handle_invite,
            Verb.KICK: self._handle_kick,
        }
        unhandled = set(Verb) - set(self._handlers)
        if unhandled:
            raise NotImplementedError(
                f"No handler for verb(s): {', '.join(sorted(v.value for v in unhandled))}"
            )

    # ------------------------------------------------------------------
    # Connection events
    # ------------------------------------------------------------------

    def register_user(self, connection_id: int) -> Broadcast:
        """
        Register a freshly connected client under a default nickname

        Returns:
            A CONNECTED broadcast for the new user only
        """
        nickname = self.users.register(connection_id)
        logger.info(f"Connection {connection_id} registered as {nickname}")
        return Broadcast.connected(nickname)

    def deregister_user(self, connection_id: int) -> Broadcast:
        """
        Remove every trace of a disconnected client

        Channels the user owns are disbanded. Raises KeyError if the
        connection id is not registered.

        Returns:
            A DISCONNECTED broadcast for everyone who shared a channel
            with the user
        """
        nickname = self.users.get_nickname(connection_id)
        if nickname is None:
            raise KeyError(f"Connection {connection_id} is not registered")

        recipients = self.channels.remove_user_everywhere(connection_id)
        self.users.deregister(connection_id)
        logger.info(f"{nickname} (connection {connection_id}) deregistered")
        return Broadcast.disconnected(nickname, recipients)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def process(self, command: Command) -> Broadcast:
        """Validate and apply one command; a failed command changes nothing"""
        broadcast = self._handlers[command.verb](command)
        if broadcast.is_error():
            logger.info(f"Rejected '{command}': {broadcast.error.name}")
        else:
            logger.debug(f"Applied '{command}' -> {len(broadcast.recipients)} recipient(s)")
        return broadcast

    def _handle_nick(self, command: Command) -> Broadcast:
        new_nickname = command.new_nickname

        # Renaming to one's own nickname counts as taken
        if self.users.contains_nickname(new_nickname):
            return Broadcast.error_for(command, ServerError.NAME_ALREADY_IN_USE)
        if not is_valid_name(new_nickname):
            return Broadcast.error_for(command, ServerError.INVALID_NAME)

        self.users.rename(command.sender_id, new_nickname)
        recipients = self.channels.rename_member(command.sender_id, new_nickname)
        return Broadcast.okay(command, recipients)

    def _handle_create(self, command: Command) -> Broadcast:
        result = self.channels.create_channel(
            command.channel,
            command.sender,
            Visibility.from_invite_only(command.invite_only)
        )
        if not result.is_okay():
            return Broadcast.error_for(command, result)
        return Broadcast.okay(command, [command.sender])

    def _handle_join(self, command: Command) -> Broadcast:
        result = self.channels.add_public_member(command.sender, command.channel)
        if not result.is_okay():
            return Broadcast.error_for(command, result)
        return self._membership_listing(command)

    def _handle_invite(self, command: Command) -> Broadcast:
        result = self.channels.add_private_member(
            command.target, command.channel, command.sender
        )
        if not result.is_okay():
            return Broadcast.error_for(command, result)
        return self._membership_listing(command)

    def _handle_mesg(self, command: Command) -> Broadcast:
        if not self.channels.has_channel(command.channel):
            return Broadcast.error_for(command, ServerError.NO_SUCH_CHANNEL)
        if not self.channels.has_member(command.channel, command.sender):
            return Broadcast.error_for(command, ServerError.USER_NOT_IN_CHANNEL)
        return Broadcast.okay(command, self.channels.get_members(command.channel))

    def _handle_leave(self, command: Command) -> Broadcast:
        # Leaving is always authorized, so the owner stands in as authorizer
        return self._remove_member(
            command, command.sender, self.channels.get_owner(command.channel)
        )

    def _handle_kick(self, command: Command) -> Broadcast:
        return self._remove_member(command, command.target, command.sender)

    def _remove_member(self, command: Command, target: str,
                       authorizer: Optional[str]) -> Broadcast:
        # Captured first so members of a disbanded channel are still told
        previous_members = self.channels.get_members(command.channel)
        result = self.channels.remove_member(target, command.channel, authorizer)
        if not result.is_okay():
            return Broadcast.error_for(command, result)
        return Broadcast.okay(command, previous_members)

    def _membership_listing(self, command: Command) -> Broadcast:
        return Broadcast.names(
            command,
            self.channels.get_members(command.channel),
            self.channels.get_owner(command.channel)
        )

    # ------------------------------------------------------------------
    # Queries. Every listing is a sorted, independent copy.
    # ------------------------------------------------------------------

    def get_user_id(self, nickname: str) -> Optional[int]:
        return self.users.get_user_id(nickname)

    def get_nickname(self, connection_id: int) -> Optional[str]:
        return self.users.get_nickname(connection_id)

    def get_registered_users(self) -> List[str]:
        return self.users.get_nicknames()

    def get_channels(self) -> List[str]:
        return self.channels.get_channel_names()

    def get_users_in_channel(self, channel_name: str) -> List[str]:
        """Members of a channel; empty if there is no such channel"""
        return self.channels.get_members(channel_name)

    def get_owner(self, channel_name: str) -> Optional[str]:
        return self.channels.get_owner(channel_name)

    def is_public_channel(self, channel_name: str) -> Optional[bool]:
        return self.channels.is_public(channel_name)
