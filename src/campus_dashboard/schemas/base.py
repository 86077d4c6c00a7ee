"""Shared pydantic configuration.

The HTTP API speaks camelCase (``courseId``, ``endTime``); Python code uses
snake_case attribute names. Either spelling is accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiSuccess(ApiModel):
    success: bool = True
