# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Document - a root Tag with its XML declaration and batch edits.

The batch ("global") helpers are plain compositions of the traversal
protocol and the entity primitives. Each one collects its targets first
and checks every precondition before changing anything, so a failing call
leaves the document as it was.

Example:
    >>> doc = Document(plano, name='plano')
    >>> doc.rename_globally('fuc', 'unidade')
    >>> doc.add_attribute_globally('unidade', 'ano', '1')
    >>> print(doc.pretty_print())
"""

from __future__ import annotations

import logging
from typing import Sequence

from .exceptions import DuplicateAttributeError, InvalidEntityError
from .names import validate_name
from .node import Attribute, Entity, Leaf, Tag
from .query import micro_xpath
from .traversal import accept

logger = logging.getLogger(__name__)


class Document:
    """A markup document.

    Args:
        root: The root Tag. It must not have a parent.
        name: Document name.
        version: Version written in the declaration line.
        encoding: Encoding written in the declaration line.

    Raises:
        InvalidEntityError: If root is not a parentless Tag.
    """

    __slots__ = ('root', 'name', 'version', 'encoding')

    def __init__(
        self,
        root: Tag,
        name: str = '',
        version: float = 1.0,
        encoding: str = 'UTF-8',
    ) -> None:
        if not isinstance(root, Tag) or root.parent is not None:
            raise InvalidEntityError("A document root must be a Tag without parent")
        self.root = root
        self.name = name
        self.version = version
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"Document({self.name!r}, root={self.root.name!r})"

    # ==================== Rendering ====================

    @property
    def declaration(self) -> str:
        return f"<?xml version={self.version} encoding={self.encoding}?>"

    def pretty_print(self, indent: str = '\t') -> str:
        """Declaration line followed by the rendered root."""
        return f"{self.declaration}\n{self.root.pretty_print(0, indent)}"

    # ==================== Queries ====================

    def find_all(self, name: str) -> list[Entity]:
        """Every entity called name, in document order."""
        found: list[Entity] = []

        def _match(entity: Entity) -> bool:
            if entity.name == name:
                found.append(entity)
            return True

        accept(self.root, _match)
        return found

    def micro_xpath(self, path: Sequence[str]) -> list[Leaf]:
        """See query.micro_xpath."""
        return micro_xpath(self.root, path)

    # ==================== Batch edits ====================

    def add_attribute_globally(
        self, tag_name: str, attr_name: str, value: str
    ) -> list[Attribute]:
        """Add attribute attr_name=value to every entity called tag_name.

        Raises:
            InvalidNameError: If attr_name is invalid.
            DuplicateAttributeError: If one of the targets already has
                attr_name. No attribute is added in that case.
        """
        validate_name(attr_name)
        targets = self.find_all(tag_name)
        for entity in targets:
            if entity.has_attribute(attr_name):
                raise DuplicateAttributeError(
                    f"Attribute with name {attr_name} already exists "
                    f"on '{entity.name}'."
                )
        added = [Attribute(attr_name, value, entity) for entity in targets]
        logger.debug("Added %s to %d <%s> entities", attr_name, len(added), tag_name)
        return added

    def rename_globally(self, old_name: str, new_name: str) -> int:
        """Rename every entity called old_name. Returns the count."""
        validate_name(new_name)
        targets = self.find_all(old_name)
        for entity in targets:
            entity.rename(new_name)
        logger.debug("Renamed %d <%s> entities to <%s>", len(targets), old_name, new_name)
        return len(targets)

    def rename_attribute_globally(
        self, tag_name: str, old_name: str, new_name: str
    ) -> int:
        """Rename attribute old_name to new_name on entities called tag_name.

        Raises:
            InvalidNameError: If new_name is invalid.
            DuplicateAttributeError: If a target already has new_name.
                Nothing is renamed in that case.
        """
        validate_name(new_name)
        renames: list[Attribute] = []
        for entity in self.find_all(tag_name):
            for attribute in entity.attributes:
                if attribute.name != old_name:
                    continue
                if new_name != old_name and entity.has_attribute(new_name):
                    raise DuplicateAttributeError(
                        f"Attribute with name {new_name} already exists "
                        f"on '{entity.name}'."
                    )
                renames.append(attribute)
        for attribute in renames:
            attribute.rename(new_name)
        logger.debug(
            "Renamed %d %s attributes to %s on <%s>",
            len(renames), old_name, new_name, tag_name,
        )
        return len(renames)

    def remove_globally(self, name: str) -> int:
        """Remove every non-root entity called name. Returns the count.

        Entities nested inside an already removed match go away with it
        and are not counted twice.
        """
        targets: list[Entity] = []

        def _match(entity: Entity) -> bool:
            if entity.name == name and entity.parent is not None:
                targets.append(entity)
                return False
            return True

        accept(self.root, _match)
        for entity in targets:
            entity.remove()
        logger.debug("Removed %d <%s> entities", len(targets), name)
        return len(targets)

    def remove_attribute_globally(self, tag_name: str, attr_name: str) -> int:
        """Remove attribute attr_name from entities called tag_name."""
        removed = 0
        for entity in self.find_all(tag_name):
            if entity.remove_attribute(attr_name) is not None:
                removed += 1
        logger.debug("Removed %d %s attributes from <%s>", removed, attr_name, tag_name)
        return removed
