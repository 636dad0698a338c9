"""Variable index resolution and cell coercion helpers.

Rows arrive as plain positional sequences; role mappings refer to variables
by name. ``resolve_indices`` translates one into the other once per request
so strategies only ever deal with integer positions.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional, Sequence

from ..errors import VariableLookupError
from ..models import RoleMapping, VariableDescriptor

__all__ = [
    "resolve_indices",
    "cell_at",
    "is_blank",
    "parse_number",
    "parse_flexible",
    "category_label",
]

# Leading decimal literal, mirrors a lenient float parse ("12abc" -> 12)
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def resolve_indices(
    variables: Sequence[VariableDescriptor], roles: RoleMapping
) -> Dict[str, List[int]]:
    """Map every role of ``roles`` to catalog positions.

    Raises VariableLookupError listing every unresolved name per role.
    """
    positions: Dict[str, int] = {}
    for pos, var in enumerate(variables):
        positions.setdefault(var.name, pos)
    indices: Dict[str, List[int]] = {}
    missing: Dict[str, List[str]] = {}
    for role, names in roles.items():
        resolved: List[int] = []
        for name in names:
            pos = positions.get(name)
            if pos is None:
                missing.setdefault(role, []).append(name)
            else:
                resolved.append(pos)
        indices[role] = resolved
    if missing:
        detail = "; ".join(f"{role} ({', '.join(names)})" for role, names in missing.items())
        raise VariableLookupError(
            f"Variables not found in dataset: {detail}", context={"missing": missing}
        )
    return indices


def cell_at(row: Sequence[Any], index: int) -> Any:
    """Return the cell at ``index`` or None for short rows."""
    return row[index] if 0 <= index < len(row) else None


def is_blank(value: Any) -> bool:
    return value is None or value == ""


def parse_number(value: Any) -> Optional[float]:
    """Coerce a cell to a finite number, or None when it is not numeric.

    Ints are kept as ints so integral sums stay integral; strings are parsed
    by their leading numeric literal.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    match = _NUMBER_PREFIX.match(str(value))
    if match is None:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def parse_flexible(value: Any) -> Any:
    """Number when the cell parses as one, otherwise its string form."""
    number = parse_number(value)
    if number is not None:
        return number
    return None if value is None else str(value)


def category_label(value: Any) -> str:
    """String form used for category / subcategory keys (1.0 -> "1")."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
