"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Letterhead:
    """Seller details printed at the top and bottom of every invoice."""

    name: str = "VIDWAT ASSOCIATES"
    address_lines: Tuple[str, ...] = (
        "#33, Arvind Nagar",
        "Near Veer Savarkar Circle",
        "Vijayapur 586101, Karnataka, India",
    )
    pan: str = "AAZFV2824J"
    gst: str = "29AAZFV2824J1ZB"
    email: str = "vidwatassociates@gmail.com"
    phone: str = "7892787054"
    # Printed under a contact's name when the request carries no address.
    default_region: str = "Karnataka,"
    terms: Tuple[str, ...] = (
        "All payments should be made electronically in the name of Vidwat Associates.",
        "All disputes shall be subjected to jurisdiction of Vijayapur.",
        "This invoice is subjected to the terms and conditions mentioned in the agreement or work order.",
    )

    def detail_lines(self) -> Tuple[str, ...]:
        return (
            *self.address_lines,
            f"PAN: {self.pan}",
            f"GST: {self.gst}",
            f"Email: {self.email}",
            f"Phone: {self.phone}",
        )


LETTERHEAD = Letterhead()

HOST = env_str("INVOICE_HOST", "0.0.0.0") or "0.0.0.0"
PORT = env_int("INVOICE_PORT", 5000, minimum=0)

MAX_BODY_BYTES = env_int("INVOICE_MAX_BODY_BYTES", 1024 * 1024, minimum=1024)
MAX_ITEMS = env_int("INVOICE_MAX_ITEMS", 1000, minimum=1)
LISTEN_BACKLOG = env_int("INVOICE_LISTEN_BACKLOG", 128, minimum=1)
ACCESS_LOG = env_flag("INVOICE_ACCESS_LOG")

SIGNATURE_PATH = env_str(
    "INVOICE_SIGNATURE_PATH",
    os.path.join(_PACKAGE_DIR, "assets", "signature.png"),
)
