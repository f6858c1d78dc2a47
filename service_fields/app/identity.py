"""
Email identity normalization and input guards.

Every component that accepts an email stores and compares the normalized
form returned here, never the raw header or body value.
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email

from shared.errors import InvalidEmailError, ValidationError


NAME_MAX_LENGTH = 100

_RESERVED_SUFFIXES = (".test", ".local", ".localhost")


def normalize_email(raw: Optional[str]) -> str:
    """Trim surrounding whitespace and lowercase. Never fails."""
    return (raw or "").strip().lower()


def validate_email_or_raise(raw: Optional[str]) -> str:
    """Validate an email claim and return its normalized form.

    Raises:
        InvalidEmailError: empty after normalization, or not a plain
            ``local@domain`` mailbox address.
    """
    email = normalize_email(raw)
    if not email:
        raise InvalidEmailError("Email is required.")

    try:
        parsed = validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError as exc:
        # Reserved TLDs are fine for a header claim; only syntax matters here.
        if email.endswith(_RESERVED_SUFFIXES) and "special-use or reserved" in str(exc):
            parsed = email
        else:
            raise InvalidEmailError("Invalid email format.") from exc

    # The parser may canonicalize (unicode, quoting); reject anything that
    # doesn't round-trip to the same address.
    if parsed.lower() != email:
        raise InvalidEmailError("Invalid email format.")

    return email


def validate_name_or_raise(value: Optional[str], label: str, max_length: int = NAME_MAX_LENGTH) -> str:
    """Return the trimmed name, or raise ValidationError."""
    name = (value or "").strip()
    if not name:
        raise ValidationError(f"{label} is required.")
    if len(name) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters.")
    return name
