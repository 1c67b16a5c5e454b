# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-Markup - In-memory markup trees with declarative projection.

A lightweight, zero-dependency library providing a tag/leaf/attribute
document model, pre-order traversal, structural leaf queries and a
projector that turns dataclasses into markup trees.
"""

import logging

__version__ = "0.1.0"

from .document import Document
from .exceptions import (
    DuplicateAttributeError,
    InvalidEntityError,
    InvalidNameError,
    MappingError,
    MarkupError,
    RemovalNotAllowedError,
)
from .mapping import (
    ChildOrderAdapter,
    FieldDescriptor,
    MarkupAdapter,
    Suffix,
    ValueTransform,
    attribute_field,
    describe,
    excluded_field,
    leaf_field,
    markup,
    markup_field,
    nested_field,
    project,
)
from .names import is_valid_name, validate_name
from .node import Attribute, Entity, Leaf, Tag, children_of, tag
from .query import NamePath, format_matches, micro_xpath
from .traversal import accept, collect, walk

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Model
    "Entity",
    "Tag",
    "Leaf",
    "Attribute",
    "Document",
    "tag",
    "children_of",
    # Names
    "is_valid_name",
    "validate_name",
    # Traversal and queries
    "accept",
    "walk",
    "collect",
    "micro_xpath",
    "NamePath",
    "format_matches",
    # Projection
    "project",
    "describe",
    "markup",
    "markup_field",
    "attribute_field",
    "leaf_field",
    "nested_field",
    "excluded_field",
    "FieldDescriptor",
    "ValueTransform",
    "Suffix",
    "MarkupAdapter",
    "ChildOrderAdapter",
    # Exceptions
    "MarkupError",
    "InvalidNameError",
    "DuplicateAttributeError",
    "InvalidEntityError",
    "RemovalNotAllowedError",
    "MappingError",
]
