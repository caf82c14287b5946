from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Bounded integer score used by every dimension and the overall result
Score = Annotated[int, Field(ge=0, le=100)]
UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]


class WireModel(BaseModel):
    """Immutable model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
