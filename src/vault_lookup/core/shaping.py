"""
Response shaping.

Turns a secret payload into the value handed back to the host. The outcome
depends on three options:

    default_field   field present   default_field_behavior   result
    -------------   -------------   ----------------------   ---------------------------
    unset           -               any                      whole payload
    set             no              unset / only             whole payload
    set             no              ignore                   NOT_FOUND
    set             yes             unset / ignore           field value
    set             yes             only                     field value if it is the
                                                             payload's only field,
                                                             else whole payload

Field values are JSON-decoded when ``default_field_parse`` is ``json``; a
value that does not decode is returned unchanged.
"""

import json
import logging
from typing import Any

from .errors import NOT_FOUND
from .options import LookupOptions

logger = logging.getLogger(__name__)


def parse_field_value(value: Any, parse: str) -> Any:
    """Decode a field value according to ``default_field_parse``."""
    if parse != "json" or not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        logger.debug("Field value is not valid JSON, returning it as a string")
        return value


def shape_payload(payload: dict[str, Any], options: LookupOptions) -> Any:
    """Apply default field extraction to a payload.

    Args:
        payload: Flat secret field mapping
        options: Lookup options carrying the default field settings

    Returns:
        The shaped value, or NOT_FOUND
    """
    field = options.default_field
    behavior = options.default_field_behavior

    if field is None:
        return payload

    if field not in payload:
        if behavior == "ignore":
            return NOT_FOUND
        return payload

    if behavior == "only" and len(payload) > 1:
        return payload

    return parse_field_value(payload[field], options.default_field_parse)
