"""
iVisa data source for visa options.
"""

from visagate.datasource.ivisa.ivisa import (
    IVisaSource,
    parse_cost,
    parse_processing_time,
)

__all__ = ["IVisaSource", "parse_cost", "parse_processing_time"]
