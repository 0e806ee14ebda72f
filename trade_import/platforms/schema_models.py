# trade_import/platforms/schema_models.py
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from trade_import.domain.enums import LogicalField


def _as_alias_list(v: Any) -> Any:
    # A single column name is shorthand for a one-element alias list
    if v is None:
        return None
    if isinstance(v, str):
        return [v]
    return v


class ColumnMapping(BaseModel):
    """
    Candidate column names per logical field, in priority order.
    Resolution takes the first alias that matches a row key case-insensitively.
    """
    model_config = ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    symbol: List[str]
    side: List[str]
    quantity: List[str]
    price: List[str]
    timestamp: List[str]
    fees: Optional[List[str]] = None
    account: Optional[List[str]] = None
    order_type: Optional[List[str]] = Field(None, alias="orderType")

    @field_validator('symbol', 'side', 'quantity', 'price', 'timestamp', 'fees', 'account', 'order_type', mode='before')
    @classmethod
    def coerce_alias_lists(cls, v: Any) -> Any:
        return _as_alias_list(v)

    @field_validator('symbol', 'side', 'quantity', 'price', 'timestamp', 'fees', 'account', 'order_type')
    @classmethod
    def validate_aliases(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        cleaned = [alias.strip() for alias in v if alias and alias.strip()]
        if not cleaned:
            raise ValueError("at least one non-empty column name is required")
        return cleaned

    def aliases_for(self, logical_field: LogicalField) -> Optional[List[str]]:
        return getattr(self, logical_field.value)


class PlatformSchema(BaseModel):
    """Declarative description of one platform's export layout."""
    model_config = ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    id: str
    name: str
    description: str = ""
    requires_date: bool = Field(False, alias="requiresDate") # Export has fill times but no trading date
    group_executions: bool = Field(False, alias="groupExecutions") # Rows are fills, not positions
    columns: ColumnMapping
    transform_set: Optional[str] = Field(None, alias="transformSet") # Registered transform table, defaults to id
    row_filter: Optional[str] = Field(None, alias="rowFilter") # Registered row filter id

    @field_validator('id', 'name')
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @model_validator(mode='before')
    @classmethod
    def default_transform_set(cls, data: Any) -> Any:
        if isinstance(data, dict) and not (data.get('transform_set') or data.get('transformSet')):
            data = {**data, 'transform_set': data.get('id')}
        return data
