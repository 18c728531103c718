"""
Input validation for RelayChat
Name rules for nicknames and channels, plus message text checks
"""

from typing import Optional, Tuple


def is_valid_name(name: Optional[str]) -> bool:
    """
    Check the name rule shared by nicknames and channel names:
    non-empty and made only of alphanumeric characters.
    """
    if not name:
        return False
    return all(char.isalnum() for char in name)


class InputValidator:
    """Validates user inputs that arrive on the wire"""

    MAX_MESSAGE_LENGTH = 4096

    @staticmethod
    def validate_nickname(nickname: str) -> Tuple[bool, Optional[str]]:
        """
        Validate nickname

        Args:
            nickname: Nickname to validate

        Returns:
            (is_valid, error_message) tuple
        """
        if not nickname:
            return (False, "Nickname cannot be empty")

        if not is_valid_name(nickname):
            return (False, "Nickname can only contain letters and numbers")

        return (True, None)

    @staticmethod
    def validate_channel_name(channel: str) -> Tuple[bool, Optional[str]]:
        """
        Validate channel name

        Args:
            channel: Channel name to validate

        Returns:
            (is_valid, error_message) tuple
        """
        if not channel:
            return (False, "Channel name cannot be empty")

        if not is_valid_name(channel):
            return (False, "Channel name can only contain letters and numbers")

        return (True, None)

    @staticmethod
    def validate_message(message: str,
                         max_length: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        """
        Validate message content

        Args:
            message: Message to validate
            max_length: Override for MAX_MESSAGE_LENGTH

        Returns:
            (is_valid, error_message) tuple
        """
        limit = max_length if max_length is not None else InputValidator.MAX_MESSAGE_LENGTH

        if len(message) > limit:
            return (False, f"Message exceeds maximum length of {limit}")

        # Check for null bytes (potential injection)
        if '\x00' in message:
            return (False, "Message contains invalid characters")

        return (True, None)
