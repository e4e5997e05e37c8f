"""Decide sendability of tags from their dependency graph.

Types are grouped into strongly connected components of the dependency graph.
A component is Sendable unless it depends on a component holding a type that
is not Sendable. Non-sendability therefore spreads to every type that depends
on it.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional, Union

from .sendable import (
    Dependency,
    DependenciesResult,
    DependencyKind,
    SendableKind,
    SendableResult,
)
from .type_model import TypeKind, TypeRef, is_type_sendable

logger = logging.getLogger(__name__)

# A graph node is a tag name for enums and records, or a canonical type otherwise.
Node = Union[str, TypeRef]

_TAG_KINDS = (TypeKind.ENUM, TypeKind.RECORD)


def _node(type_: TypeRef) -> Node:
    if type_.kind in _TAG_KINDS:
        return type_.tag
    return type_


def strongly_connected_components(
    graph: Mapping[Hashable, Iterable[Hashable]],
) -> list[frozenset]:
    """Return the strongly connected components of ``graph``.

    ``graph`` maps each node to the nodes it has edges to; nodes that appear
    only as edge targets are included. Components come in reverse topological
    order: a component is listed after every component it has edges to.
    """
    adjacency: dict[Hashable, list[Hashable]] = {}
    for node, targets in graph.items():
        adjacency.setdefault(node, [])
        for target in targets:
            adjacency[node].append(target)
            adjacency.setdefault(target, [])

    index: dict[Hashable, int] = {}
    low: dict[Hashable, int] = {}
    stack: list[Hashable] = []
    on_stack: set[Hashable] = set()
    components: list[frozenset] = []
    counter = 0

    def visit(node: Hashable) -> None:
        nonlocal counter
        index[node] = low[node] = counter
        counter += 1
        stack.append(node)
        on_stack.add(node)

    for root in adjacency:
        if root in index:
            continue
        visit(root)
        work = [(root, iter(adjacency[root]))]
        while work:
            node, successors = work[-1]
            for succ in successors:
                if succ not in index:
                    visit(succ)
                    work.append((succ, iter(adjacency[succ])))
                    break
                if succ in on_stack:
                    low[node] = min(low[node], index[succ])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])
                if low[node] == index[node]:
                    component = set()
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.add(member)
                        if member == node:
                            break
                    components.append(frozenset(component))
    return components


@dataclass
class SendableAnalysis:
    """Classifies tags as Sendable from the dependencies found for each tag."""

    dependencies: dict[str, DependenciesResult] = field(default_factory=dict)
    results: dict[str, SendableResult] = field(default_factory=dict)

    def run(self) -> dict[str, SendableResult]:
        """Classify every tag with dependencies and return the results by tag."""
        graph: dict[Node, dict[Node, None]] = {}
        for tag, deps in self.dependencies.items():
            edges = graph.setdefault(tag, {})
            for dep in deps.dependencies:
                if dep.kind is DependencyKind.SPECIAL_AVAILABLE:
                    self.results[tag] = SendableResult(SendableKind.AVAILABLE)
                elif dep.kind is DependencyKind.SPECIAL_IMPORTED_AS_REFERENCE:
                    self.results[tag] = SendableResult(
                        SendableKind.UNAVAILABLE,
                        DependenciesResult(list(deps.dependencies)),
                    )
                else:
                    edges[_node(dep.type_)] = None

        components = strongly_connected_components(graph)
        owner = {node: comp for comp in components for node in comp}

        for comp in components:
            if any(isinstance(node, str) and node in self.results for node in comp):
                continue
            neighbors = dict.fromkeys(
                owner[target]
                for node in comp
                for target in graph.get(node, ())
                if owner[target] is not comp
            )
            kind = SendableKind.AVAILABLE
            blocking: list[Dependency] = []
            for neighbor in neighbors:
                for target in neighbor:
                    if self.is_sendable(target):
                        continue
                    kind = SendableKind.UNAVAILABLE
                    for node in comp:
                        if target in graph.get(node, ()):
                            blocking.extend(
                                dep
                                for dep in self.dependencies[node].dependencies
                                if dep.type_ is not None and _node(dep.type_) == target
                            )
            for node in comp:
                if isinstance(node, str):
                    self.results[node] = SendableResult(
                        kind, DependenciesResult(list(blocking))
                    )
        return self.results

    def is_sendable(self, type_: Optional[Union[str, TypeRef]]) -> bool:
        """Decide sendability of a type, or of a tag given by name."""
        if type_ is None:
            return False
        if isinstance(type_, str):
            return self._is_tag_sendable(type_)
        return is_type_sendable(type_, self._is_tag_sendable)

    def _is_tag_sendable(self, tag: str) -> bool:
        known = self.results.get(tag)
        if known is not None:
            return known.is_available()
        deps = self.dependencies.get(tag)
        if deps is None:
            logger.warning("skipping a tag that cannot be found: %r", tag)
            return False
        sendable = True
        for dep in deps.dependencies:
            if dep.kind in (DependencyKind.INHERITANCE, DependencyKind.FIELD):
                # The base or field is examined, but the tag is then taken as Sendable.
                self.is_sendable(dep.type_)
                return True
            if dep.kind is DependencyKind.SPECIAL_AVAILABLE:
                return True
            if dep.kind is DependencyKind.SPECIAL_IMPORTED_AS_REFERENCE:
                return False
            sendable = self.is_sendable(dep.type_) and sendable
        return sendable

    def compares_equal(self, expected: SendableResult, actual: SendableResult) -> bool:
        """Kinds match and each expected blocking dependency occurs in ``actual``."""
        if expected.kind is not actual.kind:
            return False
        remaining = [str(dep) for dep in actual.unavailable_dependencies.dependencies]
        for dep in expected.unavailable_dependencies.dependencies:
            text = str(dep)
            if text not in remaining:
                return False
            remaining.remove(text)
        return True