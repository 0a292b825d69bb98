"""Display helpers for grid cells."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from ukt_console.app.core.settings import get_settings
from ukt_console.app.schemas.base import record_value


@dataclass(frozen=True)
class Column:
    field: str
    header: str
    value: Optional[Callable[[Any], Any]] = None

    def render(self, record) -> Any:
        return self.value(record) if self.value is not None else record_value(record, self.field)


def format_currency(amount: Any) -> str:
    """Format an amount as Indonesian Rupiah, e.g. ``Rp 5.000.000,00``."""
    if amount is None or amount == "":
        return ""
    try:
        value = Decimal(str(amount)).quantize(Decimal("0.01"))
    except InvalidOperation:
        return str(amount)
    sign = "-" if value < 0 else ""
    whole, cents = f"{abs(value):.2f}".split(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    return f"{sign}Rp {grouped},{cents}"


def proof_url(path: Optional[str], storage_url: Optional[str] = None) -> str:
    """Resolve a stored proof-of-payment path to a URL; absolute URLs pass through."""
    if not path:
        return ""
    if path.startswith("http://") or path.startswith("https://"):
        return path
    base = (storage_url or get_settings().storage_url).rstrip("/")
    return f"{base}/{path.lstrip('/')}"
