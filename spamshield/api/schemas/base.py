"""Shared schema configuration and the response envelope."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; accepts snake_case on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """Envelope wrapping every successful response."""

    status_code: int
    data: DataT
    message: str
    success: bool = True

    @classmethod
    def ok(cls, data: Any, message: str, status_code: int = 200) -> "ApiResponse":
        """Build a success envelope."""
        return cls(status_code=status_code, data=data, message=message, success=status_code < 400)


class ApiErrorResponse(CamelModel):
    """Envelope for error responses."""

    status_code: int
    data: None = None
    message: str
    success: bool = False
    errors: list[Any] = []
