"""
Runtime package for deferred execution and rendering.

- DeferredActionScheduler runs actions later on an asyncio loop
- FlowDiagram renders a machine's action table as Graphviz text
"""

from .graph import FlowDiagram
from .scheduler import DeferredActionScheduler

__all__ = ["FlowDiagram", "DeferredActionScheduler"]
