"""
Kreation Field Mapping
Converts a flat Kreation record into typed metaobject field entries
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

class FieldType(str, Enum):
    """Shopify field kinds used by the parfumkreation definition"""
    SINGLE_LINE = "single_line_text_field"
    MULTI_LINE = "multi_line_text_field"
    INTEGER = "number_integer"
    DECIMAL = "number_decimal"
    DATE = "date"

DEFAULT_FIELD_TYPE = FieldType.SINGLE_LINE

# Known keys of a Kreation. Anything else is stored as single line text.
FIELD_TYPES: Dict[str, FieldType] = {
    "name": FieldType.SINGLE_LINE,
    "konzentration": FieldType.SINGLE_LINE,
    "menge_ml": FieldType.INTEGER,
    "bemerkung": FieldType.MULTI_LINE,
    "datum_erstellung": FieldType.DATE,
}
for _n in (1, 2, 3):
    FIELD_TYPES[f"duft_{_n}_name"] = FieldType.SINGLE_LINE
    FIELD_TYPES[f"duft_{_n}_anteil"] = FieldType.DECIMAL
    FIELD_TYPES[f"duft_{_n}_gramm"] = FieldType.DECIMAL
    FIELD_TYPES[f"duft_{_n}_ml"] = FieldType.DECIMAL

EMPTY_PLACEHOLDER = "keine"

# Only text fields accept the placeholder literal
TEXT_TYPES = frozenset({FieldType.SINGLE_LINE, FieldType.MULTI_LINE})

class FieldSpec(BaseModel):
    """One typed metaobject field"""
    key: str
    value: str
    type: FieldType

    def as_input(self) -> Dict[str, str]:
        """Field input for the GraphQL metaobject mutations (type comes from the definition)"""
        return {"key": self.key, "value": self.value}

    def as_rest(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value, "type": self.type.value}

def field_type(key: str) -> FieldType:
    """Type for a key, single line text when unknown"""
    return FIELD_TYPES.get(key, DEFAULT_FIELD_TYPE)

def stringify(value: Any) -> str:
    """String form of a scalar as the frontend would have sent it"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def map_fields(
    record: Mapping[str, Any],
    placeholder: Optional[str] = EMPTY_PLACEHOLDER
) -> List[FieldSpec]:
    """
    Map a Kreation record to typed field entries

    Args:
        record: Field key to raw value, in the order the caller sent them
        placeholder: Literal used for empty text values. None drops empty entries instead.
            Empty integer, decimal and date values are always dropped,
            Shopify would reject the literal there.

    Returns:
        One FieldSpec per non-null, non-dropped entry, in input order
    """
    fields = []
    for key, raw in record.items():
        if raw is None:
            continue
        kind = field_type(key)
        value = stringify(raw)
        if not value.strip():
            if placeholder is None or kind not in TEXT_TYPES:
                continue
            value = placeholder
        fields.append(FieldSpec(key=key, value=value, type=kind))
    return fields

def cleared_fields(submitted: List[FieldSpec]) -> List[FieldSpec]:
    """
    Empty entries for every known key missing from submitted

    Sending these along with an update resets the omitted fields remotely,
    so an update replaces the whole Kreation instead of merging into it.
    """
    present = {spec.key for spec in submitted}
    return [
        FieldSpec(key=key, value="", type=kind)
        for key, kind in FIELD_TYPES.items()
        if key not in present
    ]
