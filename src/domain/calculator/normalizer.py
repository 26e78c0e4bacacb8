"""Form normalization.

Converts the raw strings typed in the profitability form into a validated
RentabiliteInput. Parsing never fails: anything that is not a number reads
as 0, which keeps a half-filled form computable.
"""

from __future__ import annotations

import re
from math import isfinite

from src.domain.models.deal_context import DealContextMeta
from src.domain.models.rentabilite import (
    DEFAULT_FORM,
    NUMERIC_FIELDS,
    RentabiliteForm,
    RentabiliteInput,
)

# Whitespace (including the narrow/non-breaking spaces of fr-FR formatting),
# currency and percent signs
_NOISE = re.compile(r"[\s€%]")


def parse_number_fr(raw: str | None) -> float:
    """Parse a French-formatted number.

    Accepts "250 000 €", "8,5 %", "1234.56". Empty, malformed or non-finite
    input returns 0.0.

    Args:
        raw: Raw string as typed

    Returns:
        Parsed float, or 0.0
    """
    if not raw or not isinstance(raw, str):
        return 0.0
    cleaned = _NOISE.sub("", raw).replace(",", ".")
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if isfinite(value) else 0.0


def form_to_input(form: RentabiliteForm) -> RentabiliteInput:
    """Build the engine input from the form.

    Negative numbers are clamped to 0; the flat-tax toggle passes through.
    """
    values = {name: max(0.0, parse_number_fr(getattr(form, name))) for name in NUMERIC_FIELDS}
    return RentabiliteInput(strategy=form.strategy, use_flat_tax=form.use_flat_tax, **values)


def _format_number(value: float) -> str:
    if value == 0:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def input_to_form(data: RentabiliteInput) -> RentabiliteForm:
    """Restore the form from a saved input (zeros show as empty fields)."""
    values = {name: _format_number(getattr(data, name)) for name in NUMERIC_FIELDS}
    return RentabiliteForm(strategy=data.strategy, use_flat_tax=data.use_flat_tax, **values)


def prefill_form(
    meta: DealContextMeta | None,
    form: RentabiliteForm | None = None,
) -> RentabiliteForm:
    """Seed purchase price, surface and resale target from the deal metadata.

    Only positive values are copied; other fields keep their current value.
    """
    form = form or DEFAULT_FORM
    if meta is None:
        return form

    update: dict[str, str] = {}
    if (meta.purchase_price or 0) > 0:
        update["purchase_price"] = _format_number(meta.purchase_price)
    if (meta.surface or 0) > 0:
        update["surface"] = _format_number(meta.surface)
    if (meta.resale_target or 0) > 0:
        update["target_resale_price"] = _format_number(meta.resale_target)
    return form.model_copy(update=update)
