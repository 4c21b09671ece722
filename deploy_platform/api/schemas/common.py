from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body accepting camelCase (or snake_case) keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def provided(self) -> Dict[str, Any]:
        """Fields the client sent with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
