"""
=============================================================================
HANDLERS
=============================================================================

The five route behaviors:

    ┌──────────────┬──────────────────┬───────────────────────────────────┐
    │ Handler      │ Route            │ Behavior                          │
    ├──────────────┼──────────────────┼───────────────────────────────────┤
    │ index        │ == "/"           │ 200, empty                        │
    │ EchoHandler  │ ∋ "/echo/"       │ echo last segment, optional gzip  │
    │ user_agent   │ == "/user-agent" │ reflect User-Agent header         │
    │ FileHandler  │ ∋ "/files/"      │ GET read / POST write / else 501  │
    │ (router)     │ anything else    │ 404, empty                        │
    └──────────────┴──────────────────┴───────────────────────────────────┘

Function handlers are stateless. Class handlers hold configuration
(supported encodings, the file storage).

=============================================================================
"""

from .basic import index, user_agent
from .echo import EchoHandler
from .files import FileHandler

__all__ = [
    "index",
    "user_agent",
    "EchoHandler",
    "FileHandler",
]
