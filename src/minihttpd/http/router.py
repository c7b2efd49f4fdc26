"""
=============================================================================
PATH ROUTER
=============================================================================

Maps a request path to a handler. Methods are NOT part of matching:
a route owns every method on its paths and answers 501 itself for the
ones it does not implement.

=============================================================================
MATCH TYPES
=============================================================================

    ┌──────────┬────────────────────────────┬───────────────────────────┐
    │ Type     │ Rule                       │ Example                   │
    ├──────────┼────────────────────────────┼───────────────────────────┤
    │ EXACT    │ path == pattern            │ "/user-agent"             │
    │ CONTAINS │ pattern in path            │ "/echo/" matches          │
    │          │ (substring, anywhere)      │ "/echo/abc", "/x/echo/y"  │
    └──────────┴────────────────────────────┴───────────────────────────┘

=============================================================================
FIRST MATCH WINS
=============================================================================

Routes are tried in registration order:

    1. EXACT    "/"            → index
    2. CONTAINS "/echo/"       → echo
    3. EXACT    "/user-agent"  → user agent
    4. CONTAINS "/files/"      → files
    5. (nothing matched)       → 404

So "/files/echo/x" goes to the echo route, because "/echo/" is checked
before "/files/". Registration order is behavior; keep it.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .request import HTTPRequest
from .response import HTTPResponse, not_found


# Handler: takes the request, returns the response
Handler = Callable[[HTTPRequest], HTTPResponse]


class RouteType(Enum):
    """How a route pattern is compared with the request path."""
    EXACT = "exact"         # Whole path must equal the pattern
    CONTAINS = "contains"   # Pattern must occur somewhere in the path


@dataclass
class Route:
    """A registered pattern → handler binding."""

    pattern: str
    handler: Handler
    type: RouteType = RouteType.EXACT
    name: Optional[str] = None

    def matches(self, path: str) -> bool:
        if self.type is RouteType.EXACT:
            return path == self.pattern
        return self.pattern in path


def last_segment(path: str) -> str:
    """
    Final "/"-delimited segment of a path, the argument of the echo and
    files routes:

        "/echo/abc"           → "abc"
        "/files/report.txt"   → "report.txt"
        "/echo/"              → ""
    """
    return path.rsplit("/", 1)[-1]


class Router:
    """
    Ordered list of routes with a 404 fallback.

    Usage:
        router = Router()

        @router.exact("/")
        def index(request):
            return ok()

        @router.contains("/echo/")
        def echo(request):
            ...

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        pattern: str,
        handler: Handler,
        type: RouteType = RouteType.EXACT,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route after all existing ones.

        Args:
            pattern: Path (EXACT) or path fragment (CONTAINS).
            handler: Called with the request on match.
            type: Match type.
            name: Optional label, defaults to the handler's name.

        Returns:
            The new Route.
        """
        route = Route(
            pattern=pattern,
            handler=handler,
            type=type,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        return route

    def route(self, pattern: str, type: RouteType = RouteType.EXACT,
              name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(pattern, handler, type, name)
            return handler
        return decorator

    def exact(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a handler for exactly `path`."""
        return self.route(path, RouteType.EXACT, name)

    def contains(self, fragment: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a handler for every path containing `fragment`."""
        return self.route(fragment, RouteType.CONTAINS, name)

    # =========================================================================
    # MATCHING AND DISPATCH
    # =========================================================================

    def match(self, path: str) -> Optional[Route]:
        """First route matching `path`, or None."""
        for route in self._routes:
            if route.matches(path):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Dispatch to the matching handler; 404 with empty body otherwise."""
        route = self.match(request.path)
        if route is None:
            return not_found()
        return route.handler(request)

    def routes(self) -> List[Route]:
        """Registered routes, in match order."""
        return list(self._routes)

    def describe(self) -> List[str]:
        """
        One line per route, for the startup log:

            EXACT     /
            CONTAINS  /echo/
        """
        return [f"{route.type.name:9} {route.pattern}" for route in self._routes]
