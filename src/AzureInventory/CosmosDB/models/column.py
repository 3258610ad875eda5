# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Declarative column descriptors.

A :class:`Column` couples an output column name and type with a
:class:`Transform`: a field path read from the hydrated item (or from the
ambient row context) followed by zero or more pure value transforms.
Columns are evaluated independently of one another.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core._error_codes import TRANSFORM_FAILED
from ..core.errors import TransformError

ValueFn = Callable[[Any], Any]


class ColumnType(str, Enum):
    STRING = "string"
    INT = "int"
    DOUBLE = "double"
    BOOL = "bool"
    JSON = "json"
    TIMESTAMP = "timestamp"


def _walk(source: Any, path: Sequence[str]) -> Any:
    current = source
    for key in path:
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
        else:
            current = getattr(current, key, None)
    return current


class Transform:
    """
    Extraction rule for one column.

    Instances are immutable; :meth:`transform` returns a new rule with the
    value function appended.
    """

    def __init__(self, source: str, path: Tuple[str, ...], fns: Tuple[ValueFn, ...] = ()) -> None:
        self._source = source
        self._path = path
        self._fns = fns

    @property
    def path(self) -> str:
        return ".".join(self._path)

    def transform(self, fn: ValueFn) -> "Transform":
        return Transform(self._source, self._path, self._fns + (fn,))

    def __call__(self, item: Any, context: Optional[Mapping[str, Any]] = None) -> Any:
        root = item if self._source == "item" else (context or {})
        value = _walk(root, self._path)
        for fn in self._fns:
            value = fn(value)
        return value

    def __repr__(self) -> str:
        names = "".join(f".{getattr(fn, '__name__', 'fn')}" for fn in self._fns)
        return f"Transform({self._source}:{self.path}){names}"


def from_field(path: str) -> Transform:
    """Read a dotted field path (``"collection.resource.etag"``) from the item."""
    return Transform("item", tuple(p for p in path.split(".") if p))


def from_context(key: str) -> Transform:
    """Read a value from the ambient row context, e.g. ``subscription_id``."""
    return Transform("context", (key,))


# ----------------------------------------------------------------- transforms


def to_lower(value: Any) -> Any:
    if value is None:
        return None
    return str(value).lower()


def to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return int(float(value))
    return int(value)


def id_to_akas(value: Any) -> Optional[List[str]]:
    """Build the Azure resource akas: ``azure://<id>`` and its lower-cased form."""
    if value is None:
        return None
    aka = "azure://" + str(value)
    return [aka, aka.lower()]


def to_json(value: Any) -> Any:
    """Convert management client models (and lists of them) to plain JSON values."""
    if isinstance(value, list):
        return [to_json(v) for v in value]
    if hasattr(value, "as_dict"):
        return value.as_dict()
    return value


# -------------------------------------------------------------------- columns


@dataclass(frozen=True)
class Column:
    """
    Output column declaration.

    :param name: Column name.
    :type name: str
    :param type: Semantic column type.
    :type type: ~AzureInventory.CosmosDB.models.column.ColumnType
    :param description: Human-readable description.
    :type description: str
    :param transform: Extraction rule. Defaults to ``from_field(name)``.
    :type transform: ~AzureInventory.CosmosDB.models.column.Transform or None
    """

    name: str
    type: ColumnType
    description: str = ""
    transform: Optional[Transform] = None

    def resolve(self, item: Any, context: Optional[Mapping[str, Any]] = None) -> Any:
        rule = self.transform if self.transform is not None else from_field(self.name)
        try:
            return rule(item, context)
        except (TypeError, ValueError, AttributeError) as exc:
            raise TransformError(
                f"Failed to resolve column {self.name!r}: {exc}",
                column=self.name,
                subcode=TRANSFORM_FAILED,
            ) from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class TableDefinition:
    """
    Static description of a table: its columns and key columns.

    :param name: Table name, e.g. ``"azure_cosmosdb_mongo_collection"``.
    :param description: Human-readable description.
    :param columns: Column declarations in output order.
    :param list_key_columns: Columns that must be constrained to list rows.
    :param get_key_columns: Columns that together identify a single row.
    """

    name: str
    description: str
    columns: Tuple[Column, ...]
    list_key_columns: Tuple[str, ...] = ()
    get_key_columns: Tuple[str, ...] = ()
    _by_name: Dict[str, Column] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        seen: Dict[str, Column] = {}
        for col in self.columns:
            if col.name in seen:
                raise ValueError(f"Duplicate column {col.name!r} in table {self.name!r}")
            seen[col.name] = col
        object.__setattr__(self, "_by_name", seen)

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> Column:
        return self._by_name[name]

    def row_for(self, item: Any, context: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Evaluate every column against ``item`` and return the flat row."""
        return {c.name: c.resolve(item, context) for c in self.columns}
