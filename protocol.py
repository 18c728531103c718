"""
Line protocol for RelayChat
Parses client lines into Commands and renders Broadcasts as lines
"""

from typing import List, Optional

from broadcast import Broadcast, BroadcastType
from commands import Command, Verb
from input_validator import InputValidator


PARSE_ERROR_CODE = 400


class ProtocolError(ValueError):
    """Raised for a line that cannot be turned into a Command"""


class Protocol:
    """Protocol line parser and renderer"""

    # Verb -> number of space separated arguments before any ':' text
    ARG_COUNTS = {
        Verb.NICK: 1,
        Verb.CREATE: 2,
        Verb.JOIN: 1,
        Verb.MESG: 1,
        Verb.LEAVE: 1,
        Verb.INVITE: 2,
        Verb.KICK: 2,
    }

    @staticmethod
    def parse_command(sender_id: int, sender: str, line: str,
                      max_length: Optional[int] = None) -> Command:
        """
        Parse one client line

        Args:
            sender_id: Connection id of the client that sent the line
            sender: That client's current nickname
            line: Raw line without the trailing newline
            max_length: Longest accepted line

        Returns:
            The parsed Command

        Raises:
            ProtocolError: if the line is malformed
        """
        line = line.strip('\r\n')
        is_valid, error = InputValidator.validate_message(line, max_length)
        if not is_valid:
            raise ProtocolError(error)

        # A leading ':<prefix>' is allowed; the server knows who sent it
        if line.startswith(':'):
            _, _, line = line.partition(' ')

        head, separator, text = line.partition(' :')
        parts = head.split()
        if not parts:
            raise ProtocolError("Empty command")

        try:
            verb = Verb(parts[0].upper())
        except ValueError:
            raise ProtocolError(f"Unknown command: {parts[0]}")

        args = parts[1:]
        expected = Protocol.ARG_COUNTS[verb]
        if len(args) != expected:
            raise ProtocolError(
                f"{verb.value} takes {expected} argument(s), got {len(args)}"
            )

        if verb is Verb.MESG:
            if not separator:
                raise ProtocolError("MESG text must follow ' :'")
            return Command.mesg(sender_id, sender, args[0], text)
        if separator:
            raise ProtocolError(f"{verb.value} does not take trailing text")

        if verb is Verb.NICK:
            return Command.nick(sender_id, sender, args[0])
        if verb is Verb.CREATE:
            if args[1] not in ('0', '1'):
                raise ProtocolError("CREATE flag must be 0 or 1")
            return Command.create(sender_id, sender, args[0], args[1] == '1')
        if verb is Verb.JOIN:
            return Command.join(sender_id, sender, args[0])
        if verb is Verb.LEAVE:
            return Command.leave(sender_id, sender, args[0])
        if verb is Verb.INVITE:
            return Command.invite(sender_id, sender, args[0], args[1])
        return Command.kick(sender_id, sender, args[0], args[1])

    @staticmethod
    def render_broadcast(broadcast: Broadcast) -> List[str]:
        """Lines sent to every recipient of a broadcast"""
        kind = broadcast.broadcast_type

        if kind is BroadcastType.CONNECTED:
            return [f":{broadcast.nickname} CONNECT"]
        if kind is BroadcastType.DISCONNECTED:
            return [f":{broadcast.nickname} QUIT"]
        if kind is BroadcastType.ERROR:
            return [Protocol.error(broadcast.error.code, broadcast.error.name,
                                   str(broadcast.command))]
        if kind is BroadcastType.NAMES:
            return [str(broadcast.command), Protocol.names(broadcast)]
        return [str(broadcast.command)]

    @staticmethod
    def names(broadcast: Broadcast) -> str:
        """Membership listing line, owner first and marked with '@'"""
        owner = broadcast.owner
        others = [nick for nick in broadcast.recipients if nick != owner]
        listing = ' '.join([f"@{owner}"] + others)
        return f":{owner} NAMES {broadcast.command.channel} :{listing}"

    @staticmethod
    def error(code: int, kind: str, detail: str) -> str:
        """Create an error line"""
        return f"ERROR {code} {kind} :{detail}"

    @staticmethod
    def parse_error(reason: str) -> str:
        """Error line for a line that could not be parsed"""
        return Protocol.error(PARSE_ERROR_CODE, "PARSE_ERROR", reason)
