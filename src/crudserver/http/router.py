"""
=============================================================================
REQUEST ROUTER
=============================================================================

Maps a parsed request to a handler using ordered (method, path-prefix)
rules. The first rule that matches wins; if none match, the fallback
answers 404.

=============================================================================
ROUTING TABLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │   GET /users/42                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  1. POST  /users…    → create_user                          │   │
    │   │  2. GET   /users/…   → get_user        ← MATCH!             │   │
    │   │  *  anything else    → 404 "404 not found"                  │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   get_user(request)                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Prefixes are plain string prefixes, not patterns: "/users" also matches
"/usersXYZ". Methods are matched exactly and are case-sensitive.
Handlers pick any further pieces out of the path themselves.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional, List
import logging

from .request import HTTPRequest
from .response import HTTPResponse, not_found, internal_error


logger = logging.getLogger(__name__)


# Handler: takes a request, returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered routing rule.

        Route(method="GET", prefix="/users/", handler=get_user, name="get_user")
    """

    method: str
    prefix: str
    handler: Handler
    name: Optional[str] = None

    def matches(self, method: str, path: str) -> bool:
        return method == self.method and path.startswith(self.prefix)


class Router:
    """
    First-match-wins prefix router.

    ==========================================================================
    DECORATOR-BASED API
    ==========================================================================

        router = Router()

        @router.post("/users")
        def create_user(request):
            ...

        @router.get("/users/")
        def get_user(request):
            ...

    Registration order is evaluation order.

    ==========================================================================
    """

    def __init__(self, fallback: Optional[Handler] = None):
        """
        Args:
            fallback: Handler for requests no rule matches.
                      Defaults to a 404 with body "404 not found".
        """
        self._routes: List[Route] = []
        self._fallback = fallback or _not_found_handler

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        prefix: str,
        handler: Handler,
        method: str,
        name: Optional[str] = None
    ) -> Route:
        """
        Append a routing rule.

        Args:
            prefix: Path prefix the request path must start with.
            handler: Handler to call on match.
            method: Exact request method to match.
            name: Optional route name (for listing/debugging).

        Returns:
            The registered Route.
        """
        route = Route(method=method, prefix=prefix, handler=handler, name=name)
        self._routes.append(route)
        return route

    def route(self, prefix: str, method: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(prefix, handler, method, name)
            return handler
        return decorator

    def get(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a GET rule."""
        return self.route(prefix, "GET", name)

    def post(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a POST rule."""
        return self.route(prefix, "POST", name)

    # =========================================================================
    # MATCHING AND DISPATCH
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[Route]:
        """
        Find the first rule matching method and path.

        Returns:
            The matching Route, or None.
        """
        for route in self._routes:
            if route.matches(method, path):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request and always return a response.

        A handler that raises is answered with a 500 so a single bad
        request cannot take the connection handler down with it.
        """
        route = self.match(request.method, request.path)
        handler = route.handler if route else self._fallback

        try:
            return handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return internal_error()

    def routes(self) -> List[Route]:
        """All registered rules, in evaluation order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """Print the routing table (used in the startup banner)."""
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            print(f"  {route.method:8} {route.prefix:12} {route.name or ''}")
        print(f"  {'*':8} (fallback 404)")
        print("-" * 60)


def _not_found_handler(request: HTTPRequest) -> HTTPResponse:
    return not_found("404 not found")
