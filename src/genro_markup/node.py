# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Markup node classes.

The model has three kinds of objects:

- Tag: a container entity with ordered children and no text
- Leaf: a childless entity with optional text; always has a parent Tag
- Attribute: a name/value pair owned by at most one entity

Entities are wired to their parent at construction time. The name is
validated before the entity is registered in the parent's children, so a
failed construction never leaves a half-attached node behind.

Example:
    >>> root = Tag('disciplina')
    >>> avaliacao = Tag('avaliacao', root)
    >>> componente = Leaf('componente', avaliacao, 'Hello World')
    >>> Attribute('peso', '20234', componente)
    Attribute('peso', '20234')
    >>> componente.depth
    3
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator

from .exceptions import (
    DuplicateAttributeError,
    InvalidEntityError,
    RemovalNotAllowedError,
)
from .names import validate_name


class Attribute:
    """A name/value pair attached to an entity.

    Args:
        name: Attribute name, checked against the name grammar.
        value: Attribute value.
        owner: Optional entity to attach to immediately.

    Raises:
        InvalidNameError: If name is invalid.
        DuplicateAttributeError: If owner already has an attribute
            with the same name.
    """

    __slots__ = ('_name', 'value', 'owner')

    def __init__(
        self,
        name: str,
        value: str,
        owner: Entity | None = None,
    ) -> None:
        self._name = validate_name(name)
        self.value = value
        self.owner: Entity | None = None
        if owner is not None:
            owner.add_attribute(self)

    def __repr__(self) -> str:
        return f"Attribute({self._name!r}, {self.value!r})"

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, new_name: str) -> None:
        self.rename(new_name)

    def rename(self, new_name: str) -> None:
        """Change the attribute name.

        Raises:
            InvalidNameError: If new_name is invalid.
            DuplicateAttributeError: If the owner already has another
                attribute called new_name.
        """
        validate_name(new_name)
        if self.owner is not None and new_name != self._name:
            if self.owner.has_attribute(new_name):
                raise DuplicateAttributeError(
                    f"Attribute with name {new_name} already exists."
                )
        self._name = new_name

    def pretty_print(self) -> str:
        """Render as " name='value'"."""
        return f" {self._name}='{self.value}'"


class Entity(ABC):
    """Abstract base class for Tag and Leaf.

    Each entity has:
    - name: validated against the name grammar
    - parent: the owning Tag, or None for a root
    - attributes: ordered, unique by name
    """

    __slots__ = ('_name', '_parent', '_attributes')

    def __init__(self, name: str, parent: Tag | None = None) -> None:
        self._name = validate_name(name)
        self._parent: Tag | None = None
        self._attributes: list[Attribute] = []
        if parent is not None:
            if not isinstance(parent, Tag):
                raise InvalidEntityError(
                    f"{parent!r} is not a Tag, so it can't have children"
                )
            parent._attach(self)

    # ==================== Naming ====================

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, new_name: str) -> None:
        self.rename(new_name)

    def rename(self, new_name: str) -> None:
        """Change the entity name after validating it."""
        self._name = validate_name(new_name)

    # ==================== Navigation ====================

    @property
    def parent(self) -> Tag | None:
        return self._parent

    @property
    def _(self) -> Tag:
        """Return the parent Tag for chaining.

        Example:
            >>> leaf._.leaf('sibling', 'text')
        """
        if self._parent is None:
            raise InvalidEntityError(f"'{self._name}' has no parent")
        return self._parent

    @property
    def depth(self) -> int:
        """Depth in the tree: 1 for a root, parent's depth + 1 otherwise."""
        depth = 1
        node = self._parent
        while node is not None:
            depth += 1
            node = node._parent
        return depth

    @property
    def root(self) -> Entity:
        """The topmost ancestor (self for a root)."""
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def children(self) -> list[Entity]:
        raise InvalidEntityError(
            f"'{self._name}' is not a Tag, so it doesn't have children"
        )

    def __getitem__(self, key: str | tuple[str, int]) -> Entity:
        raise InvalidEntityError(
            f"'{self._name}' is not a Tag, so it doesn't have children"
        )

    def accept(self, visitor: Callable[[Entity], bool]) -> None:
        """Visit this entity and its descendants in pre-order.

        See traversal.accept for the exact semantics.
        """
        from .traversal import accept
        accept(self, visitor)

    def remove(self) -> None:
        """Detach this entity (and its subtree) from its parent.

        Raises:
            RemovalNotAllowedError: If the entity has no parent.
        """
        if self._parent is None:
            raise RemovalNotAllowedError(
                f"The root entity '{self._name}' cannot be removed."
            )
        self._parent._detach(self)

    # ==================== Attributes ====================

    @property
    def attributes(self) -> list[Attribute]:
        """Attributes in insertion order (a copy)."""
        return list(self._attributes)

    @property
    def attr(self) -> dict[str, Any]:
        """Attribute values keyed by name, in insertion order."""
        return {a.name: a.value for a in self._attributes}

    def has_attribute(self, name: str) -> bool:
        return any(a.name == name for a in self._attributes)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the value of the attribute called name, or default."""
        for attribute in self._attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def add_attribute(self, attribute: Attribute) -> Attribute:
        """Attach an attribute to this entity.

        Raises:
            DuplicateAttributeError: If an attribute with the same name
                exists, or the attribute already belongs to an entity.
        """
        if self.has_attribute(attribute.name):
            raise DuplicateAttributeError(
                f"Attribute with name {attribute.name} already exists."
            )
        if attribute.owner is not None:
            raise DuplicateAttributeError(
                f"Attribute {attribute.name} already belongs to "
                f"'{attribute.owner.name}'."
            )
        attribute.owner = self
        self._attributes.append(attribute)
        return attribute

    def attribute(self, name: str, value: str) -> Attribute:
        """Create an attribute on this entity and return it.

        Example:
            >>> tag('fuc').attribute('codigo', 'M4310')
            Attribute('codigo', 'M4310')
        """
        return Attribute(name, value, self)

    def remove_attribute(self, attribute: Attribute | str) -> Attribute | None:
        """Remove an attribute, given the object or its name.

        Returns:
            The removed Attribute, or None if it was not found.
        """
        for index, current in enumerate(self._attributes):
            if current is attribute or current.name == attribute:
                del self._attributes[index]
                current.owner = None
                return current
        return None

    def _attributes_markup(self) -> str:
        return ", ".join(a.pretty_print() for a in self._attributes)

    # ==================== Conversion ====================

    @abstractmethod
    def pretty_print(self, depth: int = 0, indent: str = '\t') -> str:
        """Render this entity indented by depth levels."""

    def as_dict(self) -> dict[str, Any]:
        """Structural snapshot used to compare trees."""
        return {
            'name': self._name,
            'attributes': [(a.name, a.value) for a in self._attributes],
        }


class Tag(Entity):
    """A container entity with ordered children.

    Args:
        name: Tag name.
        parent: Optional parent Tag. Omit it for a document root.

    Example:
        >>> plano = Tag('plano')
        >>> fuc = plano.tag('fuc')
        >>> fuc.leaf('ects', '6.0')
        Leaf('ects', text='6.0')
        >>> plano['fuc']['ects'].text
        '6.0'
    """

    __slots__ = ('_children',)

    def __init__(self, name: str, parent: Tag | None = None) -> None:
        self._children: list[Entity] = []
        super().__init__(name, parent)

    def __repr__(self) -> str:
        return f"Tag({self._name!r}, children={len(self._children)})"

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._children))

    def __getitem__(self, key: str | tuple[str, int]) -> Entity:
        """Return the index-th child called name.

        Example:
            >>> plano['fuc']      # first child named 'fuc'
            >>> plano['fuc', 1]   # second one
        """
        if isinstance(key, tuple):
            name, index = key
        else:
            name, index = key, 0
        matches = [child for child in self._children if child.name == name]
        if not matches:
            raise KeyError(name)
        return matches[index]

    @property
    def children(self) -> list[Entity]:
        """Children in document order (a copy)."""
        return list(self._children)

    # ==================== Building ====================

    def tag(
        self,
        name: str,
        build: Callable[[Tag], Any] | None = None,
    ) -> Tag:
        """Create a child Tag, optionally running build on it."""
        child = Tag(name, self)
        if build is not None:
            build(child)
        return child

    def leaf(
        self,
        name: str,
        text: str | None = '',
        build: Callable[[Leaf], Any] | None = None,
    ) -> Leaf:
        """Create a child Leaf, optionally running build on it."""
        child = Leaf(name, self, text)
        if build is not None:
            build(child)
        return child

    def _attach(self, child: Entity) -> None:
        """Register a parentless entity as the last child."""
        node: Tag | None = self
        while node is not None:
            if node is child:
                raise InvalidEntityError(
                    f"'{child.name}' can't be attached to its own descendant"
                )
            node = node._parent
        child._parent = self
        self._children.append(child)

    def _detach(self, child: Entity) -> None:
        self._children.remove(child)
        child._parent = None

    # ==================== Reordering ====================

    def sort_children(
        self,
        key: Callable[[Entity], Any],
        reverse: bool = False,
    ) -> None:
        """Stable sort of the children in place."""
        self._children.sort(key=key, reverse=reverse)

    def reorder(self, children: list[Entity]) -> None:
        """Replace the child order with children.

        Raises:
            InvalidEntityError: If children is not a permutation of the
                current children.
        """
        current = {id(child) for child in self._children}
        proposed = {id(child) for child in children}
        if len(children) != len(self._children) or current != proposed:
            raise InvalidEntityError(
                f"Reordering '{self._name}' must keep the same children"
            )
        self._children[:] = children

    # ==================== Rendering ====================

    def opening_markup(self) -> str:
        return f"<{self._name}{self._attributes_markup()}>"

    def closing_markup(self) -> str:
        return f"</{self._name}>"

    def pretty_print(self, depth: int = 0, indent: str = '\t') -> str:
        """Render this tag and its subtree, one node per line."""
        pad = indent * depth
        if not self._children:
            return f"{pad}<{self._name}{self._attributes_markup()}/>\n"
        parts = [f"{pad}{self.opening_markup()}\n"]
        for child in self._children:
            parts.append(child.pretty_print(depth + 1, indent))
        parts.append(f"{pad}{self.closing_markup()}\n")
        return ''.join(parts)

    def as_dict(self) -> dict[str, Any]:
        result = super().as_dict()
        result['children'] = [child.as_dict() for child in self._children]
        return result


class Leaf(Entity):
    """A childless entity with optional text.

    Args:
        name: Leaf name.
        parent: The owning Tag (mandatory).
        text: Optional text; None and '' both render self-closed.

    Raises:
        InvalidEntityError: If parent is missing or is not a Tag.
    """

    __slots__ = ('text',)

    def __init__(
        self,
        name: str,
        parent: Tag,
        text: str | None = '',
    ) -> None:
        if parent is None:
            raise InvalidEntityError(f"Leaf '{name}' must have a parent Tag")
        self.text = text
        super().__init__(name, parent)

    def __repr__(self) -> str:
        return f"Leaf({self._name!r}, text={self.text!r})"

    def render_line(self) -> str:
        """Single-line rendering without indentation."""
        head = f"<{self._name}{self._attributes_markup()}"
        if not self.text:
            return f"{head}/>\n"
        return f"{head}> {self.text} </{self._name}>\n"

    def pretty_print(self, depth: int = 0, indent: str = '\t') -> str:
        return f"{indent * depth}{self.render_line()}"

    def as_dict(self) -> dict[str, Any]:
        result = super().as_dict()
        result['text'] = self.text
        return result


def tag(name: str, build: Callable[[Tag], Any] | None = None) -> Tag:
    """Create a root Tag, optionally running build on it.

    Example:
        >>> ano = tag('AnoCurricular', lambda t: t.leaf('disciplina', 'PA'))
    """
    root = Tag(name)
    if build is not None:
        build(root)
    return root


def children_of(entity: Entity) -> list[Entity]:
    """Return the children of entity.

    Raises:
        InvalidEntityError: If entity is not a Tag.
    """
    if not isinstance(entity, Tag):
        raise InvalidEntityError(
            f"'{entity.name}' is not a Tag, so it doesn't have children"
        )
    return entity.children
