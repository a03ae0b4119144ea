"""
Merge provider options with the local override table and order the result.
"""

from typing import Iterable, Sequence

from visagate.datasource.kitas import KITAS_COUNTRY_CODE
from visagate.datasource.types import VisaOption


def sort_key(option: VisaOption) -> tuple[int, float, int]:
    # Cost is compared on raw magnitude; currencies are not normalised.
    return (option.processing_time_days, option.cost, option.priority)


def merge_and_sort(
    provider_options: Iterable[VisaOption],
    destination: str,
    local_overrides: Sequence[VisaOption],
    override_country: str = KITAS_COUNTRY_CODE,
) -> list[VisaOption]:
    """
    Combine provider options with the overrides and sort them.

    The overrides are appended only when ``destination`` matches
    ``override_country`` (case-insensitive). Ordering is by processing days,
    then cost, then priority; ``sorted`` is stable so full ties keep their
    input order.
    """
    options = list(provider_options)

    if destination.upper() == override_country.upper():
        options.extend(local_overrides)

    return sorted(options, key=sort_key)
