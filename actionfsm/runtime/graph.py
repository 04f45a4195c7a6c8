"""Flow diagram rendering of a state machine's action table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from actionfsm.core.types import LabelFormatter

if TYPE_CHECKING:
    from actionfsm.core.state_machine import StateMachine


def default_label(value: Any) -> str:
    """Enum members render as their name, everything else through str()."""
    if isinstance(value, Enum):
        return value.name
    return str(value)


def _escape(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"')


@dataclass(frozen=True)
class _DiagramNode:
    """Internal node of the diagram; states and actions share one numbering."""

    index: int
    value: Any
    is_action: bool


@dataclass(frozen=True)
class _DiagramLink:
    """Internal edge. Links without an arrow run from a source state to an action."""

    source: int
    target: int
    has_arrow: bool


class FlowDiagram:
    """
    Renders a machine's action table as Graphviz ``digraph`` text.

    States become ``box`` nodes and actions ``oval`` nodes. Node 1 is always the
    initial state; the rest are numbered in the order they are first met while
    walking the registrations in table order. The output is byte-identical for
    identical registrations, and rendering never mutates the machine.
    """

    def __init__(self, machine: "StateMachine", label: Optional[LabelFormatter] = None) -> None:
        self._machine = machine
        self._label = label or default_label

    def render(self) -> str:
        nodes: List[_DiagramNode] = []
        links: List[_DiagramLink] = []
        index_of: Dict[Tuple[bool, Any], int] = {}
        seen_links = set()

        def add_node(value: Any, is_action: bool) -> int:
            key = (is_action, value)
            if key not in index_of:
                index_of[key] = len(nodes) + 1
                nodes.append(_DiagramNode(index_of[key], value, is_action))
            return index_of[key]

        def add_link(source: int, target: int, has_arrow: bool) -> None:
            link = _DiagramLink(source, target, has_arrow)
            if link not in seen_links:
                seen_links.add(link)
                links.append(link)

        add_node(self._machine.initial_state, is_action=False)
        for action, registration in self._machine.registrations():
            for from_state in registration.from_states:
                from_index = add_node(from_state, is_action=False)
                for to_state in registration.to_states:
                    to_index = add_node(to_state, is_action=False)
                    action_index = add_node(action, is_action=True)
                    add_link(from_index, action_index, has_arrow=False)
                    add_link(action_index, to_index, has_arrow=True)

        nodes_str = "".join(self._format_node(node) for node in nodes)
        links_str = "".join(self._format_link(link) for link in links)
        return (
            "digraph {\n"
            "    graph [rankdir=TB]\n"
            "    \n"
            '    0 [label="", shape=plaintext]\n'
            "    0 -> 1\n"
            "    \n"
            "    # node\n"
            f"{nodes_str}\n"
            "    \n"
            "    # links\n"
            f"{links_str}\n"
            "}"
        )

    def _format_node(self, node: _DiagramNode) -> str:
        shape = "oval" if node.is_action else "box"
        return f'    {node.index} [label="{_escape(self._label(node.value))}", shape={shape}]\n'

    def _format_link(self, link: _DiagramLink) -> str:
        if link.has_arrow:
            return f"    {link.source} -> {link.target}\n"
        return f"    {link.source} -> {link.target} [arrowhead=none]\n"

    def __str__(self) -> str:
        return self.render()
