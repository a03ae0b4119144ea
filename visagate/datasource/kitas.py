"""
Static KITAS (Indonesian limited-stay permit) options.

Injected into results when the destination is Indonesia. Costs are in IDR.
"""

from visagate.datasource.types import VisaOption

KITAS_COUNTRY_CODE = "ID"

_COMMON_PASSPORT = "Valid passport with minimum 18 months validity"

KITAS_OVERRIDES: tuple[VisaOption, ...] = (
    VisaOption(
        id="kitas-work",
        name="KITAS Work Permit",
        type="KITAS",
        visa_required=True,
        processing_time="15-30 business days",
        processing_time_days=22,
        cost=2_500_000,
        cost_currency="IDR",
        description="Work permit for foreign nationals employed in Indonesia",
        requirements=(
            _COMMON_PASSPORT,
            "Employment contract from Indonesian company",
            "Educational certificates (minimum Bachelor degree)",
            "Health certificate",
            "Police clearance certificate",
            "Company sponsorship letter",
        ),
        validity="1 year (renewable)",
        source="Indonesian Immigration",
        priority=1,
    ),
    VisaOption(
        id="kitas-investment",
        name="KITAS Investment",
        type="KITAS",
        visa_required=True,
        processing_time="20-35 business days",
        processing_time_days=27,
        cost=5_000_000,
        cost_currency="IDR",
        description="Investment permit for foreign investors in Indonesia",
        requirements=(
            "Minimum investment of USD 1,000,000",
            "Business plan approved by BKPM",
            _COMMON_PASSPORT,
            "Health certificate",
            "Police clearance certificate",
            "Bank statement showing investment funds",
        ),
        validity="2 years (renewable)",
        source="Indonesian Immigration",
        priority=2,
    ),
    VisaOption(
        id="kitas-family",
        name="KITAS Family Reunion",
        type="KITAS",
        visa_required=True,
        processing_time="10-20 business days",
        processing_time_days=15,
        cost=1_500_000,
        cost_currency="IDR",
        description="Family reunion permit for spouses and children of KITAS holders",
        requirements=(
            "Marriage certificate (for spouses)",
            "Birth certificate (for children)",
            "Sponsor's KITAS",
            _COMMON_PASSPORT,
            "Health certificate",
            "Proof of relationship",
        ),
        validity="1 year (renewable)",
        source="Indonesian Immigration",
        priority=3,
    ),
    VisaOption(
        id="kitas-student",
        name="KITAS Student",
        type="KITAS",
        visa_required=True,
        processing_time="12-25 business days",
        processing_time_days=18,
        cost=2_000_000,
        cost_currency="IDR",
        description="Student permit for foreign students studying in Indonesia",
        requirements=(
            "Acceptance letter from Indonesian educational institution",
            _COMMON_PASSPORT,
            "Educational certificates",
            "Health certificate",
            "Financial guarantee letter",
            "Study plan",
        ),
        validity="1 year (renewable)",
        source="Indonesian Immigration",
        priority=4,
    ),
)
