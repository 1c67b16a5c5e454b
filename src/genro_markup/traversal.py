# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Pre-order traversal over a markup tree.

Every higher level query or batch mutation is expressed with accept():
the visitor is called on a node first and its return value decides
whether the node's children are visited. Returning False prunes that
subtree only; the remaining siblings are still visited.

Example:
    >>> names = []
    >>> accept(root, lambda e: names.append(e.name) or True)
    >>> [e.name for e in walk(root)] == names
    True
"""

from __future__ import annotations

from typing import Callable, Iterator

from .node import Entity, Tag


def accept(entity: Entity, visitor: Callable[[Entity], bool]) -> None:
    """Visit entity and its descendants in pre-order.

    Args:
        entity: Where the traversal starts.
        visitor: Called once per visited node. A truthy return descends
            into the node's children, a falsy one skips them.
    """
    stack: list[Entity] = [entity]
    while stack:
        node = stack.pop()
        if visitor(node) and isinstance(node, Tag):
            stack.extend(reversed(node._children))


def walk(
    entity: Entity,
    callback: Callable[[Entity], object] | None = None,
) -> Iterator[Entity] | None:
    """Walk the tree in pre-order, optionally calling a callback on each node.

    Args:
        entity: Where the walk starts (included).
        callback: Optional function called on each node.
            If provided, walk returns None.

    Yields:
        Every entity in pre-order if no callback is provided.

    Example:
        >>> for node in walk(root):
        ...     print('  ' * (node.depth - 1) + node.name)

        >>> walk(root, lambda n: print(n.name))
    """
    if callback is not None:
        def _visit(node: Entity) -> bool:
            callback(node)
            return True

        accept(entity, _visit)
        return None

    def _walk_gen(start: Entity) -> Iterator[Entity]:
        stack: list[Entity] = [start]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Tag):
                stack.extend(reversed(node._children))

    return _walk_gen(entity)


def collect(entity: Entity) -> list[Entity]:
    """Return every entity under (and including) entity in pre-order."""
    visited: list[Entity] = []

    def _collect(node: Entity) -> bool:
        visited.append(node)
        return True

    accept(entity, _collect)
    return visited
