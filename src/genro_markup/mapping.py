# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Projection of structured values into markup trees.

A value is projected field by field, in declared field order, according to
a descriptor table supplied by its type. Each field has a role:

- 'excluded': skipped
- 'attribute': an Attribute on the generated Tag
- 'leaf': a child Leaf holding the field's text
- 'nested': a child Tag named after the field, with one projected child
  per element of the field's sequence value
- 'default': 'nested' for sequences, 'leaf' for anything else

The table comes from dataclass field metadata, or from a
``__markup_fields__`` declaration on the type. The ``@markup`` decorator
sets the Tag name and an optional post-build adapter for the whole type.

Example:
    >>> @markup(name='componente')
    ... @dataclass
    ... class Componente:
    ...     nome: str = attribute_field()
    ...     peso: int = attribute_field(transform=Suffix('%'))
    ...
    >>> project(Componente('Quizzes', 20)).pretty_print()
    "<componente nome='Quizzes',  peso='20%'/>\\n"
"""

from __future__ import annotations

import dataclasses
import importlib
import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping
from typing import Any, Callable, Sequence

from .exceptions import DuplicateAttributeError, InvalidNameError, MappingError
from .names import validate_name
from .node import Attribute, Leaf, Tag

logger = logging.getLogger(__name__)

ROLE_EXCLUDED = 'excluded'
ROLE_ATTRIBUTE = 'attribute'
ROLE_LEAF = 'leaf'
ROLE_NESTED = 'nested'
ROLE_DEFAULT = 'default'

ROLES = frozenset({ROLE_EXCLUDED, ROLE_ATTRIBUTE, ROLE_LEAF, ROLE_NESTED, ROLE_DEFAULT})

# Key under which markup options are stored in dataclass field metadata
METADATA_KEY = 'markup'

_descriptor_cache: dict[type, tuple[FieldDescriptor, ...]] = {}


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """How a single field is projected.

    Attributes:
        field: The field (Python attribute) name.
        role: One of ROLES.
        name: Markup name override. None means the field name.
        transform: Optional value transform, applied to the field's text.
            See resolve_transform() for the accepted forms.
    """

    field: str
    role: str = ROLE_DEFAULT
    name: str | None = None
    transform: Any = None

    @property
    def logical_name(self) -> str:
        return self.name or self.field


# ==================== Transforms and adapters ====================


class ValueTransform(ABC):
    """Base class for field value transforms."""

    @abstractmethod
    def transform(self, value: str) -> str:
        """Return the transformed text."""


class Suffix(ValueTransform):
    """Append a fixed suffix, e.g. Suffix('%') turns '20' into '20%'."""

    def __init__(self, suffix: str) -> None:
        self.suffix = suffix

    def transform(self, value: str) -> str:
        return f"{value}{self.suffix}"


class MarkupAdapter(ABC):
    """Base class for post-build adapters.

    An adapter receives the Tag built for a value, after all fields have
    been processed, and returns the Tag to use in its place (usually the
    same one, rewritten in place).
    """

    @abstractmethod
    def adapt(self, tag: Tag) -> Tag:
        """Rewrite tag and return it."""


class ChildOrderAdapter(MarkupAdapter):
    """Sort children by name using a fixed rank.

    Names missing from the order go last; ties keep their original order.

    Args:
        order: Either a sequence of names (rank = position) or a mapping
            of name to rank.

    Example:
        >>> @markup(name='fuc', adapter=ChildOrderAdapter(['nome', 'ects']))
        ... @dataclass
        ... class FUC:
        ...     ects: float
        ...     nome: str
    """

    def __init__(self, order: Mapping[str, int] | Sequence[str]) -> None:
        if isinstance(order, Mapping):
            self.order = dict(order)
        else:
            self.order = {name: rank for rank, name in enumerate(order)}

    def adapt(self, tag: Tag) -> Tag:
        tag.sort_children(key=lambda child: self.order.get(child.name, sys.maxsize))
        return tag


def _import_object(spec: str, field: str | None) -> Any:
    """Import 'package.module:attr' or 'package.module.attr'."""
    module_name, sep, attr_path = spec.partition(':')
    if not sep:
        module_name, _, attr_path = spec.rpartition('.')
    if not module_name or not attr_path:
        raise MappingError(f"Cannot resolve '{spec}'", field=field)
    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr_path.split('.'):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        raise MappingError(f"Cannot resolve '{spec}'", field=field) from exc
    return obj


def _resolve_hook(spec: Any, method_name: str, field: str | None) -> Callable:
    """Turn a hook specification into a callable.

    Accepts an import string, a class (instantiated without arguments),
    an object exposing method_name, or a plain callable.
    """
    if isinstance(spec, str):
        spec = _import_object(spec, field)
    if isinstance(spec, type):
        try:
            spec = spec()
        except Exception as exc:
            raise MappingError(
                f"Cannot instantiate {spec.__name__}", field=field
            ) from exc
    method = getattr(spec, method_name, None)
    if callable(method):
        return method
    if callable(spec):
        return spec
    raise MappingError(
        f"{spec!r} is neither callable nor provides {method_name}()", field=field
    )


def resolve_transform(spec: Any, field: str | None = None) -> Callable[[str], str]:
    """Resolve a transform specification into a str -> str callable.

    Args:
        spec: A callable, a ValueTransform class or instance (anything with
            a transform() method), or an import string such as
            'myapp.transforms:AddPercentage'.
        field: Qualified field name, used in error messages.

    Raises:
        MappingError: If the transform cannot be imported or instantiated.
    """
    return _resolve_hook(spec, 'transform', field)


def resolve_adapter(spec: Any, owner: str | None = None) -> Callable[[Tag], Tag | None]:
    """Resolve an adapter specification into a Tag -> Tag callable.

    Same accepted forms as resolve_transform(), with adapt() in place of
    transform().
    """
    return _resolve_hook(spec, 'adapt', owner)


# ==================== Declaration ====================


def parse_role(spec: str | None, field: str | None = None) -> str:
    """Parse a role specification.

    Specs are comma-separated role names. 'excluded' wins over anything it
    is combined with; 'default' is neutral; any other pair is ambiguous.

    Examples:
        >>> parse_role('leaf')
        'leaf'
        >>> parse_role('leaf, excluded')
        'excluded'
        >>> parse_role(None)
        'default'

    Raises:
        MappingError: For unknown or ambiguous roles.
    """
    if spec is None:
        return ROLE_DEFAULT
    roles = {part.strip() for part in spec.split(',') if part.strip()}
    unknown = roles - ROLES
    if unknown:
        raise MappingError(
            f"Unknown role {', '.join(sorted(unknown))} for {field}", field=field
        )
    if ROLE_EXCLUDED in roles:
        return ROLE_EXCLUDED
    roles.discard(ROLE_DEFAULT)
    if len(roles) > 1:
        raise MappingError(
            f"Ambiguous roles {', '.join(sorted(roles))} for {field}", field=field
        )
    return roles.pop() if roles else ROLE_DEFAULT


def markup_field(
    role: str | None = None,
    *,
    name: str | None = None,
    transform: Any = None,
    **kwargs: Any,
) -> Any:
    """dataclasses.field() carrying markup options in its metadata.

    Args:
        role: Role spec (see parse_role). None means 'default'.
        name: Markup name override.
        transform: Value transform (see resolve_transform).
        **kwargs: Passed to dataclasses.field (default, default_factory, ...).

    Example:
        >>> @dataclass
        ... class FUC:
        ...     codigo: str = markup_field('attribute')
        ...     nome: str = markup_field('leaf', name='designacao')
    """
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[METADATA_KEY] = {'role': role, 'name': name, 'transform': transform}
    return dataclasses.field(metadata=metadata, **kwargs)


def attribute_field(name: str | None = None, transform: Any = None, **kwargs: Any) -> Any:
    """Field projected as an Attribute."""
    return markup_field(ROLE_ATTRIBUTE, name=name, transform=transform, **kwargs)


def leaf_field(name: str | None = None, transform: Any = None, **kwargs: Any) -> Any:
    """Field projected as a child Leaf."""
    return markup_field(ROLE_LEAF, name=name, transform=transform, **kwargs)


def nested_field(name: str | None = None, **kwargs: Any) -> Any:
    """Sequence field projected as a child Tag of projected elements."""
    return markup_field(ROLE_NESTED, name=name, **kwargs)


def excluded_field(**kwargs: Any) -> Any:
    """Field left out of the projection."""
    return markup_field(ROLE_EXCLUDED, **kwargs)


def markup(name: str | None = None, adapter: Any = None) -> Callable[[type], type]:
    """Class decorator setting type-level projection options.

    Args:
        name: Tag name for projected values. Defaults to the class name.
        adapter: Optional post-build adapter (see resolve_adapter).

    The options are stored on the class as _markup_config and are not
    inherited by subclasses.
    """
    if name is not None:
        validate_name(name)

    def decorator(cls: type) -> type:
        cls._markup_config = {'name': name, 'adapter': adapter}  # type: ignore[attr-defined]
        return cls

    return decorator


def _markup_config(cls: type) -> dict[str, Any]:
    return cls.__dict__.get('_markup_config', {})


def _descriptor(cls: type, field: str, declaration: Any) -> FieldDescriptor:
    field_id = f"{cls.__name__}.{field}"
    if isinstance(declaration, FieldDescriptor):
        return dataclasses.replace(
            declaration, field=field, role=parse_role(declaration.role, field_id)
        )
    if declaration is None or isinstance(declaration, str):
        return FieldDescriptor(field, parse_role(declaration, field_id))
    if isinstance(declaration, Mapping):
        return FieldDescriptor(
            field,
            parse_role(declaration.get('role'), field_id),
            declaration.get('name'),
            declaration.get('transform'),
        )
    raise MappingError(f"Invalid declaration for {field_id}: {declaration!r}", field=field_id)


def build_descriptors(cls: type, declaration: Any) -> tuple[FieldDescriptor, ...]:
    """Normalize an explicit declaration into a descriptor table.

    Args:
        cls: The type the declaration belongs to.
        declaration: Either a mapping of field name to role spec, dict or
            FieldDescriptor, or a sequence of FieldDescriptor.

    Raises:
        MappingError: On unknown or ambiguous roles.
    """
    if isinstance(declaration, Mapping):
        return tuple(_descriptor(cls, f, d) for f, d in declaration.items())
    return tuple(_descriptor(cls, d.field, d) for d in declaration)


def describe(obj: Any) -> tuple[FieldDescriptor, ...]:
    """Return the descriptor table of a type (or of a value's type).

    Tables are cached per type.

    Raises:
        MappingError: If the type declares no fields or declares them
            ambiguously.
    """
    cls = obj if isinstance(obj, type) else type(obj)
    cached = _descriptor_cache.get(cls)
    if cached is not None:
        return cached

    declared = getattr(cls, '__markup_fields__', None)
    if declared is not None:
        table = build_descriptors(cls, declared)
    elif dataclasses.is_dataclass(cls):
        table = tuple(
            _descriptor(cls, f.name, f.metadata.get(METADATA_KEY))
            for f in dataclasses.fields(cls)
        )
    else:
        raise MappingError(f"Cannot describe the fields of {cls.__name__}")

    _descriptor_cache[cls] = table
    return table


def is_projectable(obj: Any) -> bool:
    cls = obj if isinstance(obj, type) else type(obj)
    return hasattr(cls, '__markup_fields__') or dataclasses.is_dataclass(cls)


# ==================== Projection ====================


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Collection) and not isinstance(
        value, (str, bytes, bytearray, Mapping)
    )


def _field_text(value: Any, descriptor: FieldDescriptor, field_id: str, owner: Any) -> str:
    if value is None:
        text = ''
    else:
        try:
            text = str(value)
        except Exception as exc:
            raise MappingError(
                f"Cannot convert {field_id} to text", field=field_id, owner=owner
            ) from exc
    if descriptor.transform is None:
        return text
    transform = resolve_transform(descriptor.transform, field_id)
    try:
        return transform(text)
    except Exception as exc:
        raise MappingError(
            f"Transform failed for {field_id}", field=field_id, owner=owner
        ) from exc


def _build_nested(container: Tag, value: Any, field_id: str, owner: Any) -> None:
    if value is None:
        return
    if not _is_sequence(value):
        raise MappingError(
            f"{field_id} is not a sequence", field=field_id, owner=owner
        )
    for item in value:
        if not is_projectable(item):
            raise MappingError(
                f"{field_id} contains a {type(item).__name__} that can't be projected",
                field=field_id,
                owner=owner,
            )
        container._attach(_build(item))


def _build(value: Any, descriptors: Any = None) -> Tag:
    """Build a detached Tag for value."""
    cls = type(value)
    if descriptors is None:
        table = describe(cls)
    else:
        table = build_descriptors(cls, descriptors)
    config = _markup_config(cls)

    try:
        root = Tag(config.get('name') or cls.__name__)
    except InvalidNameError as exc:
        raise MappingError(
            f"{cls.__name__} is not a valid tag name", owner=value
        ) from exc

    for descriptor in table:
        if descriptor.role == ROLE_EXCLUDED:
            continue
        field_id = f"{cls.__name__}.{descriptor.field}"
        try:
            raw = getattr(value, descriptor.field)
        except AttributeError as exc:
            raise MappingError(
                f"{field_id} can't be read", field=field_id, owner=value
            ) from exc

        role = descriptor.role
        if role == ROLE_DEFAULT:
            role = ROLE_NESTED if _is_sequence(raw) else ROLE_LEAF
        name = descriptor.logical_name

        try:
            if role == ROLE_ATTRIBUTE:
                Attribute(name, _field_text(raw, descriptor, field_id, value), root)
            elif role == ROLE_LEAF:
                Leaf(name, root, _field_text(raw, descriptor, field_id, value))
            else:
                _build_nested(Tag(name, root), raw, field_id, value)
        except (InvalidNameError, DuplicateAttributeError) as exc:
            raise MappingError(
                f"Cannot project {field_id}: {exc}", field=field_id, owner=value
            ) from exc

    adapter = config.get('adapter')
    if adapter is not None:
        adapt = resolve_adapter(adapter, cls.__name__)
        try:
            adapted = adapt(root)
        except Exception as exc:
            raise MappingError(
                f"Adapter failed for {cls.__name__}", field=cls.__name__, owner=value
            ) from exc
        if adapted is not None:
            if not isinstance(adapted, Tag) or adapted.parent is not None:
                raise MappingError(
                    f"Adapter for {cls.__name__} must return a detached Tag",
                    owner=value,
                )
            root = adapted

    logger.debug(
        "Projected %s into <%s> with %d children",
        cls.__name__, root.name, len(root),
    )
    return root


def project(value: Any, descriptors: Any = None, *, parent: Tag | None = None) -> Tag:
    """Project a structured value into a markup tree.

    Args:
        value: A dataclass instance or an instance of a type declaring
            __markup_fields__.
        descriptors: Optional descriptor table overriding the one of the
            value's type (top level only; nested elements use their own).
        parent: Optional Tag the result is attached to once fully built.

    Returns:
        The root Tag of the projection.

    Raises:
        MappingError: If a field can't be projected. Nothing is attached
            to parent in that case.
    """
    root = _build(value, descriptors)
    if parent is not None:
        parent._attach(root)
    return root
