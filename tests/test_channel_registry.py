#!/usr/bin/env python3
"""
Tests for channel_registry.py
"""

import unittest
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from channel_registry import ChannelRegistry
from models import ServerError, Visibility
from user_registry import UserRegistry


class ChannelRegistryTestCase(unittest.TestCase):
    """Three registered users: User0, User1, User2"""

    def setUp(self):
        self.users = UserRegistry()
        for connection_id in range(3):
            self.users.register(connection_id)
        self.channels = ChannelRegistry(self.users)


class TestCreateChannel(ChannelRegistryTestCase):

    def test_create_public_channel(self):
        result = self.channels.create_channel("java", "User0", Visibility.PUBLIC)

        self.assertEqual(result, ServerError.OKAY)
        self.assertEqual(self.channels.get_channel_names(), ["java"])
        self.assertEqual(self.channels.get_members("java"), ["User0"])
        self.assertEqual(self.channels.get_owner("java"), "User0")
        self.assertTrue(self.channels.is_public("java"))

    def test_create_private_channel(self):
        self.channels.create_channel("java", "User0", Visibility.PRIVATE)
        self.assertFalse(self.channels.is_public("java"))

    def test_duplicate_name(self):
        self.channels.create_channel("java", "User0")
        result = self.channels.create_channel("java", "User1")

        self.assertEqual(result, ServerError.CHANNEL_ALREADY_EXISTS)
        self.assertEqual(self.channels.get_owner("java"), "User0")

    def test_invalid_name(self):
        result = self.channels.create_channel("#java", "User0")
        self.assertEqual(result, ServerError.INVALID_NAME)
        self.assertEqual(len(self.channels), 0)

    def test_existence_checked_before_validity(self):
        # A taken name that also fails the name rule
        self.channels.create_channel("java", "User0")
        self.channels._channels["bad name"] = self.channels._channels["java"]

        result = self.channels.create_channel("bad name", "User1")
        self.assertEqual(result, ServerError.CHANNEL_ALREADY_EXISTS)

    def test_unknown_owner(self):
        result = self.channels.create_channel("java", "ghost")
        self.assertEqual(result, ServerError.NO_SUCH_USER)


class TestAddMembers(ChannelRegistryTestCase):

    def setUp(self):
        super().setUp()
        self.channels.create_channel("java", "User0", Visibility.PUBLIC)
        self.channels.create_channel("secret", "User0", Visibility.PRIVATE)

    def test_join_public(self):
        self.assertEqual(self.channels.add_public_member("User1", "java"), ServerError.OKAY)
        self.assertEqual(self.channels.get_members("java"), ["User0", "User1"])

    def test_join_errors_in_order(self):
        self.assertEqual(self.channels.add_public_member("ghost", "nowhere"),
                         ServerError.NO_SUCH_USER)
        self.assertEqual(self.channels.add_public_member("User1", "nowhere"),
                         ServerError.NO_SUCH_CHANNEL)
        self.assertEqual(self.channels.add_public_member("User1", "secret"),
                         ServerError.JOIN_PRIVATE_CHANNEL)
        self.assertEqual(self.channels.get_members("secret"), ["User0"])

    def test_invite_private(self):
        result = self.channels.add_private_member("User1", "secret", "User0")
        self.assertEqual(result, ServerError.OKAY)
        self.assertEqual(self.channels.get_members("secret"), ["User0", "User1"])

    def test_invite_errors_in_order(self):
        self.assertEqual(self.channels.add_private_member("ghost", "nowhere", "User1"),
                         ServerError.NO_SUCH_USER)
        self.assertEqual(self.channels.add_private_member("User1", "nowhere", "User1"),
                         ServerError.NO_SUCH_CHANNEL)
        self.assertEqual(self.channels.add_private_member("User1", "java", "User2"),
                         ServerError.INVITE_TO_PUBLIC_CHANNEL)
        self.assertEqual(self.channels.add_private_member("User1", "secret", "User2"),
                         ServerError.USER_NOT_OWNER)
        self.assertEqual(self.channels.get_members("secret"), ["User0"])


class TestRemoveMember(ChannelRegistryTestCase):

    def setUp(self):
        super().setUp()
        self.channels.create_channel("java", "User0")
        self.channels.add_public_member("User1", "java")

    def test_remove_non_owner(self):
        result = self.channels.remove_member("User1", "java", "User0")
        self.assertEqual(result, ServerError.OKAY)
        self.assertEqual(self.channels.get_members("java"), ["User0"])

    def test_remove_owner_disbands(self):
        result = self.channels.remove_member("User0", "java", "User0")
        self.assertEqual(result, ServerError.OKAY)
        self.assertFalse(self.channels.has_channel("java"))
        self.assertEqual(self.channels.get_members("java"), [])
        self.assertIsNone(self.channels.get_owner("java"))

    def test_remove_errors_in_order(self):
        self.assertEqual(self.channels.remove_member("ghost", "nowhere", "User0"),
                         ServerError.NO_SUCH_USER)
        self.assertEqual(self.channels.remove_member("User1", "nowhere", "User0"),
                         ServerError.NO_SUCH_CHANNEL)
        self.assertEqual(self.channels.remove_member("User2", "java", "User1"),
                         ServerError.USER_NOT_OWNER)
        self.assertEqual(self.channels.remove_member("User2", "java", None),
                         ServerError.USER_NOT_OWNER)
        self.assertEqual(self.channels.remove_member("User2", "java", "User0"),
                         ServerError.USER_NOT_IN_CHANNEL)
        self.assertEqual(self.channels.get_members("java"), ["User0", "User1"])


class TestRenameAndCleanup(ChannelRegistryTestCase):

    def setUp(self):
        super().setUp()
        self.channels.create_channel("java", "User0")
        self.channels.add_public_member("User1", "java")
        self.channels.create_channel("python", "User1")
        self.channels.add_public_member("User2", "python")
        self.channels.create_channel("lonely", "User2")

    def test_rename_member_updates_every_channel(self):
        self.users.rename(1, "alice")
        recipients = self.channels.rename_member(1, "alice")

        self.assertEqual(recipients, ["User0", "User2", "alice"])
        self.assertEqual(self.channels.get_members("java"), ["User0", "alice"])
        self.assertEqual(self.channels.get_owner("python"), "alice")

    def test_rename_of_owner_keeps_ownership(self):
        self.users.rename(0, "boss")
        self.channels.rename_member(0, "boss")

        self.assertTrue(self.channels.has_member("java", "boss"))
        self.assertEqual(self.channels.remove_member("User1", "java", "boss"), ServerError.OKAY)

    def test_remove_user_everywhere(self):
        recipients = self.channels.remove_user_everywhere(1)

        # python was owned by User1 and is gone; java only loses User1
        self.assertEqual(recipients, ["User0", "User2"])
        self.assertEqual(self.channels.get_channel_names(), ["java", "lonely"])
        self.assertEqual(self.channels.get_members("java"), ["User0"])

    def test_remove_user_in_no_channel(self):
        self.users.register(3)
        self.assertEqual(self.channels.remove_user_everywhere(3), [])
        self.assertEqual(len(self.channels), 3)

    def test_listings_are_snapshots(self):
        names = self.channels.get_channel_names()
        members = self.channels.get_members("java")
        names.append("fake")
        members.append("fake")

        self.assertNotIn("fake", self.channels.get_channel_names())
        self.assertNotIn("fake", self.channels.get_members("java"))


if __name__ == '__main__':
    unittest.main()
