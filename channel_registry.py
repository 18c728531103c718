"""
Channel registry for RelayChat Server

Owns channels, their owners and member lists. Every mutating call
returns a ServerError and changes nothing unless it returns OKAY.
"""

import logging
from typing import Dict, List, Optional

from input_validator import is_valid_name
from models import Channel, ServerError, Visibility
from user_registry import UserRegistry


logger = logging.getLogger(__name__)


class ChannelRegistry:
    """Maps channel names to Channel records"""

    def __init__(self, users: UserRegistry):
        self._users = users
        self._channels: Dict[str, Channel] = {}  # name -> Channel

    def create_channel(self, name: str, owner_nickname: str,
                       visibility: Visibility = Visibility.PUBLIC) -> ServerError:
        """
        Create a channel owned by owner_nickname

        A taken name is reported before an invalid one, so a name that
        is both yields CHANNEL_ALREADY_EXISTS.
        """
        if name in self._channels:
            return ServerError.CHANNEL_ALREADY_EXISTS
        if not is_valid_name(name):
            return ServerError.INVALID_NAME

        owner_id = self._users.get_user_id(owner_nickname)
        if owner_id is None:
            return ServerError.NO_SUCH_USER

        channel = Channel(name=name, owner_id=owner_id, visibility=visibility)
        channel.add_member(owner_id, owner_nickname)
        self._channels[name] = channel
        logger.info(f"Created {visibility.value} channel {name} owned by {owner_nickname}")
        return ServerError.OKAY

    def add_public_member(self, nickname: str, channel_name: str) -> ServerError:
        """Add a user to a public channel"""
        user_id = self._users.get_user_id(nickname)
        if user_id is None:
            return ServerError.NO_SUCH_USER

        channel = self._channels.get(channel_name)
        if channel is None:
            return ServerError.NO_SUCH_CHANNEL
        if not channel.is_public():
            return ServerError.JOIN_PRIVATE_CHANNEL

        channel.add_member(user_id, nickname)
        logger.debug(f"{nickname} joined {channel_name}")
        return ServerError.OKAY

    def add_private_member(self, nickname: str, channel_name: str,
                           inviting_sender: str) -> ServerError:
        """Add a user to a private channel on behalf of its owner"""
        user_id = self._users.get_user_id(nickname)
        if user_id is None:
            return ServerError.NO_SUCH_USER

        channel = self._channels.get(channel_name)
        if channel is None:
            return ServerError.NO_SUCH_CHANNEL
        if channel.is_public():
            return ServerError.INVITE_TO_PUBLIC_CHANNEL
        if not channel.is_owner(inviting_sender):
            return ServerError.USER_NOT_OWNER

        channel.add_member(user_id, nickname)
        logger.debug(f"{inviting_sender} invited {nickname} to {channel_name}")
        return ServerError.OKAY

    def remove_member(self, target_nickname: str, channel_name: str,
                      authorizing_sender: Optional[str]) -> ServerError:
        """
        Remove a member, authorized by the channel owner

        Removing the owner deletes the whole channel.
        """
        target_id = self._users.get_user_id(target_nickname)
        if target_id is None:
            return ServerError.NO_SUCH_USER

        channel = self._channels.get(channel_name)
        if channel is None:
            return ServerError.NO_SUCH_CHANNEL
        if authorizing_sender is None or not channel.is_owner(authorizing_sender):
            return ServerError.USER_NOT_OWNER
        if not channel.has_member(target_id):
            return ServerError.USER_NOT_IN_CHANNEL

        if target_id == channel.owner_id:
            del self._channels[channel_name]
            logger.info(f"Channel {channel_name} disbanded, owner {target_nickname} removed")
        else:
            channel.remove_member(target_id)
            logger.debug(f"{target_nickname} removed from {channel_name}")
        return ServerError.OKAY

    def rename_member(self, connection_id: int, nickname: str) -> List[str]:
        """
        Rewrite a user's membership records after a rename

        Returns:
            Sorted union of the members of every channel the user is in
        """
        recipients = set()
        for channel in self._channels.values():
            if channel.has_member(connection_id):
                channel.add_member(connection_id, nickname)
                recipients.update(channel.members.values())
        return sorted(recipients)

    def remove_user_everywhere(self, connection_id: int) -> List[str]:
        """
        Drop a departing user from every channel

        Channels the user owns are disbanded; in the others only the
        membership goes.

        Returns:
            Sorted union of the affected channels' ex-members, without
            the departing user
        """
        recipients = set()
        for name, channel in list(self._channels.items()):
            if not channel.has_member(connection_id):
                continue
            recipients.update(channel.members.values())
            if channel.owner_id == connection_id:
                del self._channels[name]
                logger.info(f"Channel {name} disbanded, owner disconnected")
            else:
                channel.remove_member(connection_id)

        departing = self._users.get_nickname(connection_id)
        recipients.discard(departing)
        return sorted(recipients)

    # Queries. Listings are sorted copies.

    def has_channel(self, channel_name: str) -> bool:
        return channel_name in self._channels

    def has_member(self, channel_name: str, nickname: str) -> bool:
        channel = self._channels.get(channel_name)
        return channel is not None and nickname in channel.members.values()

    def get_channel_names(self) -> List[str]:
        return sorted(self._channels)

    def get_members(self, channel_name: str) -> List[str]:
        channel = self._channels.get(channel_name)
        return channel.member_nicknames() if channel else []

    def get_owner(self, channel_name: str) -> Optional[str]:
        channel = self._channels.get(channel_name)
        return channel.owner if channel else None

    def is_public(self, channel_name: str) -> Optional[bool]:
        """Visibility of a channel, or None if there is no such channel"""
        channel = self._channels.get(channel_name)
        return channel.is_public() if channel else None

    def __len__(self) -> int:
        return len(self._channels)
