"""
Identifier validation

Users are identified by email address. Only the syntactic shape is checked;
no DNS or mailbox lookup is performed.
"""

import re

_LOCAL_PART = r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
_DOMAIN_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"

EMAIL_PATTERN = re.compile(
    rf"^{_LOCAL_PART}@{_DOMAIN_LABEL}(?:\.{_DOMAIN_LABEL})*$"
)


def is_valid_identifier(value: object) -> bool:
    """Return True if ``value`` is a string shaped like ``local@domain``."""
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None
