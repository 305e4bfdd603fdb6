"""
=============================================================================
CRUDSERVER - User CRUD Service Over Raw TCP
=============================================================================

A deliberately small service: it accepts HTTP-shaped requests on a raw
TCP socket, understands exactly two of them, and stores users in a
relational table.

    POST /users        {"name": "...", "email": "..."}  → create
    GET  /users/{id}                                     → read

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    crudserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m crudserver)
    ├── server.py            # CRUDServer: startup + per-connection flow
    ├── config.py            # ServerConfig dataclass
    ├── errors.py            # Error taxonomy
    ├── models.py            # User record
    ├── access_log.py        # Per-request access log
    ├── core/
    │   ├── socket_server.py # Sequential accept loop
    │   └── connection.py    # One read, one write, close
    ├── http/
    │   ├── request.py       # bytes → method/path/body
    │   ├── response.py      # fixed status literals + body
    │   ├── router.py        # ordered prefix rules
    │   └── status_codes.py  # 200 / 404 / 500
    ├── handlers/
    │   └── users.py         # create / read-by-id
    └── storage/
        └── gateway.py       # SQLAlchemy gateway, one connection per op

=============================================================================
QUICK START
=============================================================================

    from crudserver import CRUDServer, ServerConfig

    server = CRUDServer(ServerConfig(database_url="postgresql://app@localhost/app"))
    server.run()

    $ curl -X POST localhost:8080/users -d '{"name":"Alice","email":"a@x.com"}'
    {"id":417,"status":"created"}

    $ curl localhost:8080/users/417
    {"id":417,"name":"Alice","email":"a@x.com"}

=============================================================================
"""

__version__ = "1.0.0"

from .server import CRUDServer, create_app
from .config import ServerConfig
from .models import User

__all__ = ["CRUDServer", "ServerConfig", "User", "create_app", "__version__"]
