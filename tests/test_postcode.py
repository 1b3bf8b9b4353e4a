"""
Tests for the instant-booking postcode coverage check.
"""

from app.application.utils.postcode import (
    OUT_OF_AREA_MESSAGE,
    get_coverage_area_name,
    is_postcode_in_coverage,
    normalize_postcode,
    validate_postcode,
)


def test_cambridge_postcode_is_covered():
    """CB1 2AB is inside the Cambridge area."""
    result = validate_postcode("CB1 2AB")
    assert result.is_valid
    assert result.type == "success"
    assert result.area == "Cambridge area"
    assert result.message == "Great! We provide instant online bookings in the Cambridge area."


def test_whitespace_and_case_are_ignored():
    """Lowercase input with stray spaces matches the same prefix."""
    assert validate_postcode("  cb22 5aa ").is_valid
    assert normalize_postcode(" cb 22 5aa") == "CB225AA"


def test_other_regions():
    assert validate_postcode("CM7 1AA").area == "Essex area"
    assert validate_postcode("CO10 2AB").area == "Essex area"
    assert validate_postcode("IP33 1AA").area == "Suffolk area"
    assert validate_postcode("SG8 5AA").area == "Hertfordshire area"


def test_out_of_area_is_info_not_error():
    """A well-formed postcode outside coverage is informational."""
    result = validate_postcode("SW1A 1AA")
    assert not result.is_valid
    assert result.type == "info"
    assert result.message == OUT_OF_AREA_MESSAGE
    assert result.area is None


def test_too_short_is_error():
    result = validate_postcode(" C ")
    assert not result.is_valid
    assert result.type == "error"
    assert result.message == "Please enter a valid postcode"


def test_prefix_matching_is_by_leading_characters():
    """CB12 starts with CB1, so it is treated as covered."""
    assert validate_postcode("CB12 1AA").is_valid
    assert not validate_postcode("IP1 1AA").is_valid


def test_helpers():
    assert is_postcode_in_coverage("CB1 2AB")
    assert not is_postcode_in_coverage("M1 1AA")
    assert get_coverage_area_name("SG9 0AA") == "Hertfordshire area"
    assert get_coverage_area_name("M1 1AA") == "Unknown"


def test_deterministic():
    assert validate_postcode("CB21 4RJ") == validate_postcode("CB21 4RJ")
