from __future__ import annotations

import logging
import re
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_VARIABLE = re.compile(r"\{\{\s*([A-Za-z0-9_.\-]+)\s*\}\}")


def substitute(value: Any, variables: Mapping[str, Any]) -> Any:
    """Replace {{name}} placeholders in strings, recursing into dicts and lists.

    Placeholders without a matching variable are left as they are.
    """
    if isinstance(value, str):
        def _replace(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name not in variables:
                logger.debug("No value for variable '%s'; leaving placeholder", name)
                return match.group(0)
            return str(variables[name])

        return _VARIABLE.sub(_replace, value)
    if isinstance(value, Mapping):
        return {k: substitute(v, variables) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute(v, variables) for v in value]
    return value
