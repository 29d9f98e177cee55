"""
Shipping-details normalization.

Checkout forms changed shape over time, so the same fact arrives under
several keys. Each helper walks its keys in priority order.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from oddwheels.shipping import Carrier

WEB_CUSTOMER = "WEB CUSTOMER"

_NAME_KEYS = ("receiver_name", "recipient_name")
_CONTACT_KEYS = (
    "receiver_phone",
    "recipient_phone",
    "phone",
    "contact",
    "contact_number",
    "customer_phone",
)


def pick_str(value: Any) -> str | None:
    """Stripped string, or None when blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first(details: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        if (found := pick_str(details.get(key))) is not None:
            return found
    return None


def customer_name(details: Mapping[str, Any]) -> str:
    if (name := _first(details, _NAME_KEYS)) is not None:
        return name
    parts = [pick_str(details.get("first_name")), pick_str(details.get("last_name"))]
    full = " ".join(p for p in parts if p)
    return full or WEB_CUSTOMER


def contact(details: Mapping[str, Any]) -> str | None:
    return _first(details, _CONTACT_KEYS)


def address(details: Mapping[str, Any]) -> str | None:
    if (full := pick_str(details.get("full_address"))) is not None:
        return full

    line = pick_str(details.get("address_line"))
    brgy = pick_str(details.get("brgy"))
    if line and brgy:
        return f"{line}, Brgy {brgy}"
    if line:
        return line

    for key in ("dropoff_address", "pickup_location"):
        if (found := pick_str(details.get(key))) is not None:
            return found

    try:
        return json.dumps(dict(details), default=str)
    except (TypeError, ValueError):
        return None


def carrier_from_method(method: Carrier | str) -> str:
    try:
        return Carrier(str(method).upper()).value
    except ValueError:
        return "OTHER"


__all__ = (
    "WEB_CUSTOMER",
    "pick_str",
    "customer_name",
    "contact",
    "address",
    "carrier_from_method",
)
