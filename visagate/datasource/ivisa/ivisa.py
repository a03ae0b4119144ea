"""
iVisa API data source for visa options.

The provider answers ``GET <url>?countryCode=..&nationality=..&apiKey=..`` with
``{"visaOptions": [...]}``. Processing time and cost arrive as free text and
are normalised here so results can be sorted.
"""

import math
import re
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from visagate.datasource.base import BaseDataSource
from visagate.datasource.types import VisaOption
from visagate.services.errors import MalformedResponseError

DEFAULT_PROCESSING_TIME = "5-7 business days"
DEFAULT_PROCESSING_DAYS = 7
DEFAULT_REQUIREMENTS = ("Valid passport", "Completed application form")
# Provider options rank behind the local overrides (priorities 1-4)
PRIORITY_OFFSET = 100

_FIRST_NUMBER = re.compile(r"(\d+)")
_COST_NUMBER = re.compile(r"[\d,]+\.?\d*")


class IVisaOptionPayload(BaseModel):
    """One entry of the provider's ``visaOptions`` list."""

    model_config = ConfigDict(extra="allow")

    id: str | int | None = None
    visa_type: str | None = Field(default=None, alias="visaType")
    name: str | None = None
    visa_required: bool | None = Field(default=None, alias="visaRequired")
    processing_time: str | None = Field(default=None, alias="processingTime")
    cost: float | str | None = None
    currency: str | None = None
    description: str | None = None
    requirements: list[str] | None = None
    validity: str | None = None


class IVisaResponse(BaseModel):
    """Top-level provider payload."""

    model_config = ConfigDict(extra="allow")

    visa_options: list[IVisaOptionPayload] | None = Field(
        default=None, alias="visaOptions"
    )


def parse_processing_time(processing_time: str) -> int:
    """
    Convert a human-readable processing time into whole days.

    Only the first number counts, so "5-7 business days" is 5 days.
    Unrecognised text defaults to a week.
    """
    time_str = processing_time.lower()
    match = _FIRST_NUMBER.search(time_str)
    value = int(match.group(1)) if match else 0

    if "hour" in time_str:
        return math.ceil(value / 24)
    if "day" in time_str:
        return value
    if "week" in time_str:
        return value * 7
    if "month" in time_str:
        return value * 30

    return DEFAULT_PROCESSING_DAYS


def parse_cost(cost: str | float | int) -> float:
    """Extract the numeric amount from a cost such as "$1,299.50"."""
    if isinstance(cost, (int, float)):
        return float(cost)

    match = _COST_NUMBER.search(str(cost))
    if match:
        digits = match.group(0).replace(",", "")
        if digits:
            return float(digits)

    return 0.0


class IVisaSource(BaseDataSource[VisaOption]):
    """
    iVisa API data source.

    Fetches provider visa options and maps them onto VisaOption values.
    Requires an API key from iVisa.
    """

    SERVICE_ID = "ivisa"

    async def fetch(self, destination: str, nationality: str) -> list[VisaOption]:
        """
        Fetch visa options from iVisa.

        Raises:
            FetchError: On transport, status or payload-shape failures
        """
        payload = await self.client.fetch(destination, nationality)
        return self._transform_response(payload)

    def _transform_response(self, data: dict[str, Any]) -> list[VisaOption]:
        """Transform the iVisa response to VisaOption models."""
        try:
            response = IVisaResponse.model_validate(data)
            options = [
                self._to_visa_option(option, index)
                for index, option in enumerate(response.visa_options or [])
            ]
        except ValidationError as e:
            raise MalformedResponseError(
                f"{e.error_count()} validation error(s) in visaOptions",
                service_id=self.service_id,
            ) from e

        logger.info(f"Fetched {len(options)} iVisa options")
        return options

    @staticmethod
    def _to_visa_option(option: IVisaOptionPayload, index: int) -> VisaOption:
        processing_time = option.processing_time or DEFAULT_PROCESSING_TIME
        requirements = (
            option.requirements
            if option.requirements is not None
            else DEFAULT_REQUIREMENTS
        )

        return VisaOption(
            id=f"ivisa-{option.id or index}",
            name=option.visa_type or option.name or "iVisa Option",
            type="iVisa",
            visa_required=option.visa_required is not False,
            processing_time=processing_time,
            processing_time_days=parse_processing_time(processing_time),
            cost=parse_cost(option.cost or "0"),
            cost_currency=option.currency or "USD",
            description=option.description or "Visa option from iVisa",
            requirements=tuple(requirements),
            validity=option.validity or "90 days",
            source="iVisa",
            priority=PRIORITY_OFFSET + index,
        )
