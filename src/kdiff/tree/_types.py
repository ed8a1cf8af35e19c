"""
Type aliases and the ABSENT sentinel for untyped resource trees.

A tree is what a YAML document parses into: string-keyed dicts, lists, and
scalars. Every tree operation switches on node shape with isinstance checks
against Mapping / List, treating everything else as a scalar.

- Node: any tree node
- Mapping / List: the two container shapes
- FieldPath: tuple of string segments addressing a node
- ABSENT: "no node here", distinct from a YAML null (None)
"""

from __future__ import annotations

import typing as _typing

Scalar: _typing.TypeAlias = str | int | float | bool | None

if _typing.TYPE_CHECKING:
    Node: _typing.TypeAlias = "Mapping | List | Scalar"
    Mapping: _typing.TypeAlias = dict[str, "Node"]
    List: _typing.TypeAlias = list["Node"]
else:
    # Runtime-safe fallback (mypy uses TYPE_CHECKING branch)
    Node: _typing.TypeAlias = object
    Mapping: _typing.TypeAlias = dict
    List: _typing.TypeAlias = list

# Example: ("spec", "template", "spec", "containers", "0", "image")
FieldPath: _typing.TypeAlias = tuple[str, ...]


def _get_absent_singleton() -> _AbsentType:
    """Return the ABSENT singleton. Called by pickle to reconstruct."""
    return ABSENT


class _AbsentType:
    """
    Sentinel type marking the absence of a node.

    Lookups return ABSENT instead of raising, so "missing" is an ordinary
    outcome. Use the ABSENT constant, not the class.
    """

    __slots__ = ()

    _instance: _AbsentType | None = None

    def __new__(cls) -> _AbsentType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _AbsentType:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> _AbsentType:
        return self

    def __reduce__(self) -> tuple[_typing.Callable[[], _AbsentType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_absent_singleton, ())


ABSENT = _AbsentType()

# A node, or ABSENT where no node exists
MaybeNode: _typing.TypeAlias = "Node | _AbsentType"


def is_absent(value: _typing.Any) -> bool:
    """Check if a value is the ABSENT sentinel."""
    return value is ABSENT


def is_mapping(node: _typing.Any) -> bool:
    """True if node is a map node."""
    return isinstance(node, dict)


def is_list(node: _typing.Any) -> bool:
    """True if node is a list node."""
    return isinstance(node, list)
