"""Reusable pydantic base models for configuration and wire data."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that accepts camel case aliases for every field.

    Python code uses the snake_case field names. Inputs may use either
    spelling, which keeps the models tolerant of clients that emit
    `bestDescendant` instead of `best_descendant`.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))


class StrictBaseModel(CamelModel):
    """A strict, immutable pydantic base model that rejects unknown keys."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }


class WireModel(CamelModel):
    """
    A strict, immutable model for payloads produced by beacon nodes.

    Unknown keys are ignored: node implementations add fields freely and
    only the ones we declare matter to the monitor.
    """

    model_config = CamelModel.model_config | {
        "extra": "ignore",
        "frozen": True,
        "strict": True,
    }
