"""Detect entity aliases shared by deidentify and reidentify."""

from sky_cli.lib.errors import UnknownEntityError
from sky_cli.lib.result import Err, Ok, Result, collect

# CLI alias -> Detect API entity type
ENTITY_MAP: dict[str, str] = {
    "SSN": "ssn",
    "CREDIT_CARD": "credit_card",
    "CREDIT_CARD_NUMBER": "credit_card",
    "EMAIL": "email_address",
    "EMAIL_ADDRESS": "email_address",
    "PHONE_NUMBER": "phone_number",
    "PHONE": "phone_number",
    "NAME": "name",
    "DOB": "dob",
    "DATE_OF_BIRTH": "dob",
    "ACCOUNT_NUMBER": "account_number",
    "DRIVER_LICENSE": "driver_license",
    "PASSPORT_NUMBER": "passport_number",
    "PASSPORT": "passport_number",
}

AVAILABLE_ENTITIES: tuple[str, ...] = tuple(ENTITY_MAP)

DEFAULT_ENTITIES: tuple[str, ...] = (
    "ssn",
    "credit_card",
    "email_address",
    "phone_number",
    "name",
    "dob",
)


def lookup(alias: str) -> Result[str, UnknownEntityError]:
    entity = ENTITY_MAP.get(alias.strip().upper())
    if entity is None:
        return Err(UnknownEntityError(alias.strip(), AVAILABLE_ENTITIES))
    return Ok(entity)


def parse_entities(value: str | None) -> Result[list[str] | None, UnknownEntityError]:
    """Parse a comma-separated alias list. Ok(None) when nothing was given."""
    if not value:
        return Ok(None)
    aliases = [a for a in value.split(",") if a.strip()]
    if not aliases:
        return Ok(None)
    return collect(lookup(a) for a in aliases)
