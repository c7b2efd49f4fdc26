"""
=============================================================================
MIDDLEWARE INTERFACE
=============================================================================

A middleware sits between the connection layer and the router and sees
every request/response pair:

    Request ──► [Access log] ──► Router ──► handler
                     │                         │
    Response ◄───────┴─────────────────────────┘

Each middleware receives the request plus `next`, the rest of the chain.
It may inspect the request, call next(request), and inspect the
response on the way back out. Middleware here must not add headers:
the wire format of every route is fixed.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Base class for middleware.

    Subclasses implement __call__(request, next) and return the response,
    normally the one produced by next(request).
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        ...

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Ordered list of middleware wrapped around a final handler.

    First added is outermost:

        pipeline.add(A).add(B)
        pipeline.wrap(handler)(request)   # A → B → handler → B → A
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        self._middleware.append(middleware)
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """Build the chain once; the result is a plain request → response callable."""
        current = handler
        for middleware in reversed(self._middleware):
            current = self._bind(middleware, current)
        return current

    @staticmethod
    def _bind(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
