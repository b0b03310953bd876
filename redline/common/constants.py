"""Shared constants for entity classification and masking."""

# Entity types treated as personally sensitive (compared case-insensitively).
SENSITIVE_TYPES: frozenset[str] = frozenset(
    {
        "credit_card",
        "credit_card_number",
        "card_number",
        "dob",
        "date_of_birth",
        "birth_date",
        "phone_number",
        "phone",
        "ssn",
        "social_security_number",
        "passport_number",
        "passport",
        "email",
        "email_address",
        "address",
        "location_address",
    }
)

# Display variant that also hides person names.
SENSITIVE_TYPES_WITH_NAMES: frozenset[str] = SENSITIVE_TYPES | {"person_name"}

KEY_TERM_ENTITY_TYPE = "key_term"

# Single character used by the exact-offset pass, repeated to the span length.
MASK_GLYPH = "•"

# Fixed-width replacement used by the fuzzy-pattern pass.
MASK_TOKEN = MASK_GLYPH * 20

# Fixed replacement for sensitive values in aggregated table cells.
AGGREGATE_MASK = "********"

UNLOCATED_TIMESTAMP = "0:00.000"


def sensitive_types(include_person_names: bool = False) -> frozenset[str]:
    """Return the sensitive type set, optionally including person names."""
    if include_person_names:
        return SENSITIVE_TYPES_WITH_NAMES
    return SENSITIVE_TYPES


def is_sensitive(entity_type: str | None, types: frozenset[str] = SENSITIVE_TYPES) -> bool:
    """Check whether an entity type belongs to a sensitive type set."""
    if not entity_type:
        return False
    return entity_type.casefold() in types
