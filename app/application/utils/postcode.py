from __future__ import annotations

import re

from app.domain.entities.postcode import PostcodeValidationResult


# Outward-code prefixes within roughly 20 miles of CB21 4RJ.
COVERAGE_REGIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Cambridge area",
        ("CB1", "CB2", "CB3", "CB4", "CB5", "CB6", "CB7", "CB8", "CB9",
         "CB10", "CB11", "CB21", "CB22", "CB23", "CB24", "CB25"),
    ),
    ("Essex area", ("CO10", "CO9", "CM7", "CM6", "CM22", "CM23")),
    ("Suffolk area", ("IP28", "IP29", "IP32", "IP33")),
    ("Hertfordshire area", ("SG8", "SG9")),
)

COVERAGE_AREAS: frozenset[str] = frozenset(
    prefix for _, prefixes in COVERAGE_REGIONS for prefix in prefixes
)

OUT_OF_AREA_MESSAGE = (
    "Unfortunately you are currently out of the area we can provide immediate online bookings for. "
    "Please use our quote form to tell us what you need and where you are located and we will do our best to help."
)

_WHITESPACE = re.compile(r"\s")


def normalize_postcode(postcode: str) -> str:
    return _WHITESPACE.sub("", postcode.strip().upper())


def _region_for(clean: str) -> str:
    # Declared order wins, not the longest prefix.
    for label, prefixes in COVERAGE_REGIONS:
        letters = {p.rstrip("0123456789") for p in prefixes}
        if any(clean.startswith(code) for code in letters):
            return label
    return "our service area"


def validate_postcode(postcode: str) -> PostcodeValidationResult:
    """Check whether a free-text postcode falls inside the instant-booking area.

    Out-of-area postcodes come back as type "info", not "error": the input is
    fine, the customer just needs the quote form instead.
    """
    clean = normalize_postcode(postcode)

    if len(clean) < 2:
        return PostcodeValidationResult(
            is_valid=False,
            message="Please enter a valid postcode",
            type="error",
        )

    candidates = (clean[:2], clean[:3], clean[:4])
    if any(candidate in COVERAGE_AREAS for candidate in candidates):
        area = _region_for(clean)
        return PostcodeValidationResult(
            is_valid=True,
            message=f"Great! We provide instant online bookings in the {area}.",
            type="success",
            area=area,
        )

    return PostcodeValidationResult(
        is_valid=False,
        message=OUT_OF_AREA_MESSAGE,
        type="info",
    )


def is_postcode_in_coverage(postcode: str) -> bool:
    return validate_postcode(postcode).is_valid


def get_coverage_area_name(postcode: str) -> str:
    return validate_postcode(postcode).area or "Unknown"
