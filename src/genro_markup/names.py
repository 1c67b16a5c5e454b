# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Name grammar shared by entities and attributes.

A name starts with a letter or ':' and continues with letters, digits,
'-', '.' or ':'.

Example:
    >>> is_valid_name('fuc')
    True
    >>> is_valid_name('Unidade Curricular')
    False
"""

from __future__ import annotations

import re
from typing import Any

from .exceptions import InvalidNameError

NAME_PATTERN = re.compile(r'[:A-Za-z][-.:A-Za-z0-9]*')


def is_valid_name(name: Any) -> bool:
    """Return True if name satisfies the name grammar."""
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name) is not None


def validate_name(name: Any) -> str:
    """Check a name against the grammar.

    Args:
        name: The candidate name.

    Returns:
        The name, unchanged.

    Raises:
        InvalidNameError: If name is empty, not a string, or does not
            match the grammar.
    """
    if not is_valid_name(name):
        raise InvalidNameError(f"Invalid name: {name!r}")
    return name
