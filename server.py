"""
RelayChat Server - line based chat server
Owns one ServerModel and fans its Broadcasts out to live connections
"""

import asyncio
import itertools
import logging
import argparse
from typing import Dict, Optional

from colorama import Fore, Style, init as colorama_init

from broadcast import Broadcast
from config_manager import ConfigManager
from protocol import Protocol, ProtocolError
from server_model import ServerModel


logger = logging.getLogger('RelayChat-Server')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# asyncio's default StreamReader buffer
STREAM_LIMIT = 2 ** 16

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColorFormatter(logging.Formatter):
    """Colors each log line by level"""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{Style.RESET_ALL}"


def configure_logging(level: str = 'INFO', color: bool = True):
    """Install a single console handler on the root logger"""
    colorama_init()
    handler = logging.StreamHandler()
    formatter = ColorFormatter(LOG_FORMAT) if color else logging.Formatter(LOG_FORMAT)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


class Connection:
    """Represents a connected client"""

    def __init__(self, connection_id: int, reader: asyncio.StreamReader,
                 writer: asyncio.StreamWriter):
        self.connection_id = connection_id
        self.reader = reader
        self.writer = writer

        peername = writer.get_extra_info('peername')
        self.address = f"{peername[0]}:{peername[1]}" if peername else "unknown"

    async def send(self, line: str):
        """Send one line to this client"""
        if self.writer.is_closing():
            return
        try:
            self.writer.write(line.encode('utf-8') + b'\n')
            await self.writer.drain()
        except OSError as e:
            logger.error(f"Error sending to connection {self.connection_id}: {e}")

    async def close(self):
        if self.writer.is_closing():
            return
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error closing connection {self.connection_id}: {e}")

    def __repr__(self):
        return f"Connection({self.connection_id}, {self.address})"


class RelayChatServer:
    """Accepts connections and routes every line through the server model"""

    def __init__(self, config: Optional[ConfigManager] = None,
                 host: Optional[str] = None, port: Optional[int] = None):
        self.config = config or ConfigManager()
        self.host = host if host is not None else self.config.get('server', 'host')
        self.port = port if port is not None else self.config.get('server', 'port')
        self.server_name = self.config.get('server', 'name')
        self.max_line_length = self.config.get('limits', 'max_line_length')
        # Room for a full line of 4-byte UTF-8 characters plus "\r\n"
        self.stream_limit = max(STREAM_LIMIT, self.max_line_length * 4 + 2)
        self.read_timeout = self.config.get('limits', 'read_timeout') or None

        self.model = ServerModel()
        self.connections: Dict[int, Connection] = {}  # connection_id -> Connection
        self._connection_ids = itertools.count()
        self._lock: Optional[asyncio.Lock] = None
        self._server: Optional[asyncio.AbstractServer] = None

    async def start(self) -> asyncio.AbstractServer:
        """Bind the listening socket; the bound port is stored in self.port"""
        # One command at a time goes through the model
        self._lock = asyncio.Lock()
        self._server = await asyncio.start_server(
            self.handle_client, self.host, self.port,
            limit=self.stream_limit
        )

        addr = self._server.sockets[0].getsockname()
        self.port = addr[1]
        logger.info(f'{self.server_name} started on {addr[0]}:{addr[1]}')
        return self._server

    async def serve_forever(self):
        """Start the server and run until cancelled"""
        server = await self.start()
        logger.info('Press Ctrl+C to stop')
        async with server:
            try:
                await server.serve_forever()
            finally:
                await self.stop()

    async def stop(self):
        """Close the listener and every open connection"""
        if self._server is None:
            return
        self._server.close()
        for connection in list(self.connections.values()):
            await connection.close()
        await self._server.wait_closed()
        self._server = None
        logger.info('Server stopped')

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle a new client connection"""
        connection = Connection(next(self._connection_ids), reader, writer)
        logger.info(f"New connection from {connection.address}")

        async with self._lock:
            self.connections[connection.connection_id] = connection
            await self.deliver(self.model.register_user(connection.connection_id))

        try:
            while True:
                try:
                    data = await asyncio.wait_for(reader.readline(), timeout=self.read_timeout)
                except asyncio.TimeoutError:
                    logger.warning(f"Read timeout for {connection}")
                    break

                if not data:
                    break

                line = data.decode('utf-8', errors='replace').strip()
                if len(line) > self.max_line_length:
                    logger.warning(f"Line too long from {connection}")
                    await connection.send(Protocol.parse_error("Line too long"))
                    continue

                if line:
                    await self.handle_line(connection, line)

        except (OSError, ValueError) as e:
            # ValueError: line overran the stream buffer
            logger.error(f"Error handling {connection}: {e}")
        finally:
            await self.disconnect_client(connection)

    async def handle_line(self, connection: Connection, line: str):
        """Parse one line and apply it to the model"""
        async with self._lock:
            sender = self.model.get_nickname(connection.connection_id)
            try:
                command = Protocol.parse_command(
                    connection.connection_id, sender, line, self.max_line_length
                )
            except ProtocolError as e:
                logger.warning(f"Invalid line from {sender}: {e}")
                await connection.send(Protocol.parse_error(str(e)))
                return

            await self.deliver(self.model.process(command))

    async def deliver(self, broadcast: Broadcast):
        """Send a broadcast's lines to every recipient still connected"""
        lines = Protocol.render_broadcast(broadcast)
        for nickname in broadcast.recipients:
            connection = self.connections.get(self.model.get_user_id(nickname))
            if connection is None:
                logger.debug(f"No live connection for {nickname}")
                continue
            for line in lines:
                await connection.send(line)

    async def disconnect_client(self, connection: Connection):
        """Deregister a client and tell the users it shared channels with"""
        async with self._lock:
            self.connections.pop(connection.connection_id, None)
            nickname = self.model.get_nickname(connection.connection_id)
            if nickname is not None:
                await self.deliver(self.model.deregister_user(connection.connection_id))
                logger.info(f"Client {nickname} ({connection.address}) disconnected")

        await connection.close()


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description='RelayChat Server')
    parser.add_argument('--host', default=None, help='Host to bind to')
    parser.add_argument('--port', type=int, default=None, help='Port to bind to')
    parser.add_argument('--config', default='relaychat_config.json', help='Path to config file')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('--no-color', action='store_true', help='Disable colored log output')

    args = parser.parse_args()

    config = ConfigManager(args.config)
    level = 'DEBUG' if args.verbose else config.get('logging', 'level', default='INFO')
    configure_logging(level, color=config.get('logging', 'color') and not args.no_color)

    server = RelayChatServer(config, host=args.host, port=args.port)

    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


if __name__ == '__main__':
    main()
