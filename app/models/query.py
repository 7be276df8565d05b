"""Query and table schema models.

- Qual / QueryContext: pydantic models describing what a caller asks for
  (per-column predicates and an optional row limit).
- ColumnType / Column / KeyColumn: lightweight dataclasses describing a
  table's static schema and which predicates it accepts for pushdown.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

Operator = Literal["=", "<>", ">=", "<="]


class Qual(BaseModel):
    """A single (operator, value) predicate on a column."""

    operator: Operator
    value: Optional[Union[int, str]] = None

    model_config = {"frozen": True}


class QueryContext(BaseModel):
    """Per-query descriptor supplied by the caller.

    Attributes:
        quals: Predicates keyed by column name.
        limit: Optional upper bound on the number of rows to return.
    """

    quals: Dict[str, List[Qual]] = Field(default_factory=dict)
    limit: Optional[int] = None

    model_config = {"frozen": True}


class ColumnType(Enum):
    STRING = "string"
    INT = "int"
    TIMESTAMP = "timestamp"
    JSON = "json"


@dataclass(frozen=True)
class Column:
    """Output column declaration.

    Attributes:
        name: Column name exposed to queries.
        type: Semantic type of the column value.
        description: Human readable description.
        transform: Projection from a finding record to the column value.
    """

    name: str
    type: ColumnType
    description: str
    transform: Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class KeyColumn:
    """A column the caller may push predicates down on."""

    name: str
    operators: Tuple[str, ...] = ("=",)
    require: Literal["optional", "required"] = "optional"

    def accepts(self, operator: str) -> bool:
        return operator in self.operators
