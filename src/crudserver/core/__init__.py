"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    socket_server.py   listening socket + sequential accept loop
    connection.py      one accepted client: one read, one write, close

    ┌─────────────────┐   accept()   ┌────────────┐   read/send   ┌────────┐
    │  SocketServer   │ ───────────► │ Connection │ ◄───────────► │ client │
    └─────────────────┘              └────────────┘               └────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accepts connections, services them one by one
    "Connection",       # Wrapper for a client socket
    "ConnectionState",  # Lifecycle states of a Connection
]
