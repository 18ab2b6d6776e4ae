"""Typed contracts for use-case inputs/outputs and catalog/scenario files.

Monetary amounts are Decimals in Python and serialize as JSON numbers
(``model_dump(mode="json")``) so output stays machine-friendly.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from quotectl.domain.rows import DiscountApplication, DiscountType
from quotectl.domain.summary import DiscountScope
from quotectl.domain.units import PricingType

Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# --- Catalog entities ---


class CategoryData(BaseModel):
    id: str
    name: str
    description: str = ""
    order: int = 0


class TierData(BaseModel):
    min_quantity: int
    max_quantity: int | None = None
    unit_price: Amount
    name: str = ""


class PricingItemData(BaseModel):
    """One catalog item as exposed by the query use cases."""

    id: str
    name: str
    description: str
    base_price: Amount
    currency: str
    category: CategoryData
    quantity: int = 1
    unit: str = ""
    pricing_type: PricingType = PricingType.ONE_TIME
    tiers: list[TierData] = Field(default_factory=list)


# --- CalculatePricing ---


class CalculatePricingInput(BaseModel):
    """Input for ``CalculatePricingUseCase``.

    Values are checked by the use case, not by pydantic, so that bad
    quantities and rates surface as application ValidationErrors.
    """

    item_ids: list[str]
    quantities: dict[str, int | float] = Field(default_factory=dict)
    discount_code: str | None = None
    tax_rate: Decimal | None = None


class CalculatedItem(BaseModel):
    id: str
    name: str
    base_price: Amount
    quantity: int
    total: Amount
    currency: str


class CalculatePricingOutput(BaseModel):
    items: list[CalculatedItem]
    subtotal: Amount
    discount: Amount
    discount_rate: Amount
    tax: Amount
    tax_rate: Amount
    total: Amount
    currency: str
    calculated_at: str


# --- Item queries ---


class GetPricingItemsInput(BaseModel):
    category_id: str | None = None
    search_term: str | None = None


class GetPricingItemsOutput(BaseModel):
    items: list[PricingItemData]
    total: int


class GetPricingItemByIdInput(BaseModel):
    item_id: str


class GetPricingItemByIdOutput(BaseModel):
    item: PricingItemData | None = None


# --- Scenario summary ---


class GlobalDiscountData(BaseModel):
    amount: Amount
    type: DiscountType
    scope: DiscountScope


class SummaryRowData(BaseModel):
    id: str
    item_id: str
    name: str
    category_id: str
    bucket: str
    quantity: int
    unit_price: Amount
    before_discount: Amount
    total: Amount
    is_free: bool


class SavingsData(BaseModel):
    original_total: Amount
    total_savings: Amount
    free_item_savings: Amount
    discount_savings: Amount
    row_discount_total: Amount
    global_discount_total: Amount
    savings_rate: Amount


class CategorySubtotalData(BaseModel):
    id: str
    name: str
    order: int
    total: Amount
    item_count: int


class ScenarioSummaryData(BaseModel):
    """Payload contract for ``QuoteService.summarize``."""

    one_time_subtotal: Amount
    monthly_subtotal: Amount
    one_time_total: Amount
    monthly_total: Amount
    yearly_total: Amount
    total_project_cost: Amount
    savings: SavingsData
    categories: list[CategorySubtotalData]
    rows: list[SummaryRowData]
    global_discount: GlobalDiscountData
    item_count: int
    currency: str


# --- Catalog and scenario files ---


class TierRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_quantity: int = Field(ge=0)
    max_quantity: int | None = Field(default=None, ge=0)
    unit_price: Decimal = Field(ge=0)
    id: str = ""
    name: str = ""


class CategoryRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    description: str = ""
    order: int = 0


class ItemRecord(BaseModel):
    """A catalog item as written in a catalog file; ``category`` is an id."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    description: str = ""
    base_price: Decimal = Field(ge=0)
    currency: str | None = None
    category: str
    quantity: int = 1
    unit: str = ""
    pricing_type: PricingType = PricingType.ONE_TIME
    tiers: list[TierRecord] = Field(default_factory=list)
    quantity_source_fields: list[str] = Field(default_factory=list)
    quantity_multiplier: Decimal = Field(default=Decimal(1), ge=0)
    auto_add_trigger_fields: list[str] = Field(default_factory=list)


class CatalogFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    categories: list[CategoryRecord] = Field(default_factory=list)
    items: list[ItemRecord] = Field(default_factory=list)


class SelectedRowRecord(BaseModel):
    """A selected row in a scenario file.

    ``quantity`` falls back to the config-driven quantity and
    ``unit_price`` to the item's effective (tier or base) price when
    omitted.
    """

    model_config = ConfigDict(extra="forbid")

    item_id: str
    id: str = ""
    quantity: int | None = Field(default=None, ge=0)
    unit_price: Decimal | None = Field(default=None, ge=0)
    discount: Decimal = Decimal(0)
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_application: DiscountApplication = DiscountApplication.TOTAL
    is_free: bool = False


class GlobalDiscountRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Decimal = Field(default=Decimal(0), ge=0)
    type: DiscountType = DiscountType.PERCENTAGE
    scope: DiscountScope = DiscountScope.BOTH


class ScenarioFile(BaseModel):
    """A saved quote: selected rows, global discount, and client config.

    With ``auto_add`` on, catalog items whose trigger fields are set in
    ``config`` join the selection.
    """

    model_config = ConfigDict(extra="forbid")

    selected: list[SelectedRowRecord] = Field(default_factory=list)
    global_discount: GlobalDiscountRecord = Field(default_factory=GlobalDiscountRecord)
    config: dict[str, Any] = Field(default_factory=dict)
    auto_add: bool = True
