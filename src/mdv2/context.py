"""Per-call render state shared by the tree and span renderers."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# rule(node, index, context) -> rendered text
Rule = Callable[[Any, int, 'RenderContext'], str]


@dataclass
class ListRenderState:
    """One open list: its kind and the next ordinal to emit."""

    kind: str = 'none'  # none | bullet | ordered
    counter: int = 1

    def next_ordinal(self) -> int:
        n = self.counter
        self.counter += 1
        return n


@dataclass
class RenderContext:
    """Everything a rule may read or mutate during one render call.

    Allocated fresh per call; never stored on a module or a parser instance.
    """

    rules: Mapping[str, Rule]
    lists: list[ListRenderState] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    quote_depth: int = 0
    line_start: bool = True

    @property
    def current_list(self) -> ListRenderState:
        return self.lists[-1] if self.lists else ListRenderState()


def build_rule_table(
    defaults: Mapping[str, Rule],
    overrides: Mapping[str, Rule] | None = None,
) -> Mapping[str, Rule]:
    """Merge caller overrides onto defaults into a new read-only table."""
    table = dict(defaults)
    if overrides:
        table.update(overrides)
    return MappingProxyType(table)
