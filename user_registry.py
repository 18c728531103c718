"""
User registry for RelayChat Server
Maps live connection ids to unique nicknames
"""

import logging
from typing import Dict, List, Optional

from models import User


logger = logging.getLogger(__name__)

DEFAULT_NICKNAME_PREFIX = "User"


class UserRegistry:
    """Owns the connection id <-> nickname mapping"""

    def __init__(self):
        self._users: Dict[int, User] = {}  # connection_id -> User

    def register(self, connection_id: int) -> str:
        """
        Register a new connection under a default nickname

        The nickname is "User<N>" with N the smallest non-negative
        integer not currently taken, so names freed by disconnects
        are handed out again.

        Returns:
            The assigned nickname
        """
        taken = {user.nickname for user in self._users.values()}
        suffix = 0
        while f"{DEFAULT_NICKNAME_PREFIX}{suffix}" in taken:
            suffix += 1
        nickname = f"{DEFAULT_NICKNAME_PREFIX}{suffix}"

        self._users[connection_id] = User(connection_id, nickname)
        logger.debug(f"Registered connection {connection_id} as {nickname}")
        return nickname

    def deregister(self, connection_id: int):
        """Remove a user entry; channel cleanup is the caller's job"""
        if connection_id not in self._users:
            raise KeyError(f"Connection {connection_id} is not registered")
        user = self._users.pop(connection_id)
        logger.debug(f"Deregistered connection {connection_id} ({user.nickname})")

    def rename(self, connection_id: int, nickname: str):
        """Set a new nickname; uniqueness and validity are checked by the caller"""
        self._users[connection_id].nickname = nickname

    def get_user_id(self, nickname: str) -> Optional[int]:
        """Connection id for a nickname, or None"""
        for user in self._users.values():
            if user.nickname == nickname:
                return user.connection_id
        return None

    def get_nickname(self, connection_id: int) -> Optional[str]:
        """Nickname for a connection id, or None"""
        user = self._users.get(connection_id)
        return user.nickname if user else None

    def contains_nickname(self, nickname: str) -> bool:
        return self.get_user_id(nickname) is not None

    def get_nicknames(self) -> List[str]:
        """Sorted snapshot of all registered nicknames"""
        return sorted(user.nickname for user in self._users.values())

    def __len__(self) -> int:
        return len(self._users)
