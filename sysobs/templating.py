"""
Placeholder substitution for pattern and subject templates.

Templates reference values with a percent-prefixed token name, e.g.
``app-%date.log`` or ``[%environment] %level``.
"""

import re
from collections.abc import Mapping


def render(template: str, values: Mapping[str, str]) -> str:
    """
    Replace every ``%name`` token of the template with its value.

    Substitution is done in a single pass: replacement text is never
    substituted again. Tokens with no entry in ``values`` are left as is.
    Longer token names win over shorter ones sharing a prefix.

    Args:
        template: Template string containing ``%name`` tokens
        values: Mapping from token name (without ``%``) to replacement

    Returns:
        The rendered string
    """
    if not values:
        return template

    names = sorted(values, key=len, reverse=True)
    token = re.compile("%(" + "|".join(re.escape(name) for name in names) + ")")
    return token.sub(lambda match: values[match.group(1)], template)
