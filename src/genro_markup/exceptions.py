# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Markup model exceptions."""

from __future__ import annotations


class MarkupError(Exception):
    """Base exception for markup model errors."""

    pass


class InvalidNameError(MarkupError):
    """Raised when an entity or attribute name violates the name grammar."""

    pass


class DuplicateAttributeError(MarkupError):
    """Raised when an attribute name is already used on the same entity."""

    pass


class InvalidEntityError(MarkupError):
    """Raised when a tag-only operation is attempted on another entity."""

    pass


class RemovalNotAllowedError(MarkupError):
    """Raised when removing an entity that has no parent."""

    pass


class MappingError(MarkupError):
    """Raised when a value cannot be projected into the markup model.

    Attributes:
        field: Qualified name of the offending field ('Type.field'),
            or None when the failure concerns the type itself.
        owner: The value being projected when the error occurred.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        owner: object = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.owner = owner
