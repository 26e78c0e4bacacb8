"""Active deal context models.

The deal context is written by the Pipeline page and read by other pages to
know which deal is being worked on and to seed their forms.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DealContextMeta(BaseModel):
    """Enriched metadata of the active deal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str | None = None
    stage: str | None = None
    address: str | None = None
    zip_code: str | None = None
    city: str | None = None
    purchase_price: float | None = Field(None, ge=0, description="Asking or agreed price in €")
    surface: float | None = Field(None, ge=0, description="Surface area in m²")
    resale_target: float | None = Field(None, ge=0, description="Target resale price in €")
    note: str | None = None

    @property
    def location_label(self) -> str:
        """Address line shown above the form, e.g. "3 rue X, 69003 Lyon — T3"."""
        parts = []
        if self.address:
            parts.append(f"{self.address},")
        if self.zip_code:
            parts.append(self.zip_code)
        if self.city:
            parts.append(self.city)
        label = " ".join(parts)
        if self.title:
            label = f"{label} — {self.title}" if label else self.title
        return label


class DealContext(BaseModel):
    """Active deal id plus its metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    active_deal_id: str | None = None
    meta: DealContextMeta | None = None
    updated_at: str = ""
