"""Chrome DevTools Protocol client layer.

- CDPClient: WebSocket command/response client with timeout racing
- PageDriver: named page effects (enable, navigate, evaluate)
"""

from .connection import CDPClient
from .page import PageDriver

__all__ = ["CDPClient", "PageDriver"]
