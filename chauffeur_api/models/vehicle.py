from typing import Union

from pydantic import BaseModel, ConfigDict


class Vehicle(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str = ""
    # Whole-number rates stay integers on the wire
    rate: Union[int, float]
