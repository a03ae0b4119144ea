"""
Visa option types using Pydantic models.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

VisaOptionType = Literal["iVisa", "KITAS"]


class VisaOption(BaseModel):
    """One way of obtaining a visa for a destination.

    Serialised with camelCase keys (``model_dump(by_alias=True)``), which is
    also the layout kept in the cache store.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    type: VisaOptionType
    visa_required: bool = Field(alias="visaRequired")
    processing_time: str = Field(alias="processingTime")
    processing_time_days: int = Field(ge=0, alias="processingTimeDays")
    cost: float = Field(ge=0)
    cost_currency: str = Field(alias="costCurrency")
    description: str
    requirements: tuple[str, ...] = ()
    validity: str
    source: str
    priority: int  # lower wins ties

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
