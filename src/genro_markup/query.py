# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Structural path matching over leaves ("micro xpath").

A path is a sequence of names read as '.../n0/n1/.../nk'. It matches every
Leaf called nk whose ancestor chain ends with n0 .. nk-1. The match is a
suffix match: the chain does not need to reach the document root, so
['avaliacao', 'componente'] matches a componente under any avaliacao.

Example:
    >>> path = NamePath('fuc') / 'avaliacao' / 'componente'
    >>> for leaf in micro_xpath(plano, path):
    ...     print(leaf.get_attribute('nome'))
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .names import validate_name
from .node import Entity, Leaf
from .traversal import accept


class NamePath(list):
    """A list of validated names built with the '/' operator.

    Example:
        >>> NamePath('fuc') / 'avaliacao' / 'componente'
        ['fuc', 'avaliacao', 'componente']
    """

    def __init__(self, *names: str) -> None:
        super().__init__(validate_name(name) for name in names)

    def __truediv__(self, name: str) -> NamePath:
        result = NamePath(*self)
        result.append(validate_name(name))
        return result

    def __rtruediv__(self, name: str) -> NamePath:
        return NamePath(name, *self)


def path_accepted(leaf: Leaf, path: Sequence[str]) -> bool:
    """Check whether leaf's ancestor chain ends with path.

    The path is consumed from its tail: each popped name must equal the
    name of the current node, starting at leaf and moving to the parent
    after each match. An exhausted path accepts at any depth; a path left
    over once the chain runs past the root rejects.
    """
    remaining = list(path)
    node: Entity | None = leaf
    while remaining:
        if node is None or remaining.pop() != node.name:
            return False
        node = node.parent
    return True


def micro_xpath(root: Entity, path: Sequence[str]) -> list[Leaf]:
    """Find the leaves matching path, in document order.

    Args:
        root: Entity where the search starts.
        path: Names from outermost to the leaf name.

    Returns:
        Matching Leaf nodes in pre-order. An empty path matches nothing.

    Raises:
        TypeError: If path is a plain string.
        InvalidNameError: If any element of path is not a valid name.
    """
    if isinstance(path, str):
        raise TypeError(f"path must be a sequence of names, not the string {path!r}")
    names = [validate_name(name) for name in path]
    if not names:
        return []
    target = names[-1]
    candidates: list[Leaf] = []

    def _collect(entity: Entity) -> bool:
        if isinstance(entity, Leaf) and entity.name == target:
            candidates.append(entity)
        return True

    accept(root, _collect)
    return [leaf for leaf in candidates if path_accepted(leaf, names)]


def format_matches(leaves: Iterable[Leaf]) -> str:
    """Concatenate the single-line rendering of each leaf."""
    return ''.join(leaf.render_line() for leaf in leaves)
