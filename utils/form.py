"""Form encoding for operation parameter sets."""

from __future__ import annotations

from typing import Dict, Mapping, Optional
from urllib.parse import urlencode


def encode_form(values: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Return the form fields to send for a parameter set.

    Absent (``None``) values are omitted rather than sent as empty strings.
    Fields keep the mapping's order.
    """
    return {key: str(value) for key, value in values.items() if value is not None}


def form_body(form: Mapping[str, str]) -> bytes:
    """URL-encode form fields as a UTF-8 request body."""
    return urlencode(form).encode("utf-8")
