from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    return value


class Params(Dict[str, str]):
    """Flat string-keyed request parameters.

    The `add_*` helpers skip zero values so optional fields are only sent
    when set.
    """

    def add_non_empty(self, key: str, value: Optional[str]) -> None:
        if value:
            self[key] = value

    def add_non_zero(self, key: str, value: Optional[int | float]) -> None:
        if value:
            self[key] = str(value)

    def add_bool(self, key: str, value: Optional[bool]) -> None:
        if value:
            self[key] = "true"

    def add_first_valid(self, key: str, *values: Any) -> None:
        for value in values:
            if value is None or value == "" or value == 0:
                continue
            self[key] = str(value)
            return

    def add_json(self, key: str, value: Any) -> None:
        """Store `value` JSON-encoded. Pydantic models are dumped without None fields."""
        if value is None:
            return
        if isinstance(value, (list, tuple, dict)) and not value:
            return
        self[key] = json.dumps(_to_jsonable(value), ensure_ascii=False, separators=(",", ":"))
