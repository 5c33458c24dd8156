"""
SmartMenu settings snapshot as returned by the primary API.

The upstream is the source of truth; this is a read-through copy that the
hybrid cache stores and replaces wholesale.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NraClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    nra_classification: str


class MenuClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    menu_type: str


class CuisineClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    cuisine_type: str


class EntityAnalytics(BaseModel):
    """Optional per-entity analytics rollup attached by the warehouse."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    total_orders: int | None = None
    total_diner_visits: int | None = None
    last_order_date: str | None = None


class EntitySettings(BaseModel):
    """
    Mutable state of one SmartMenu (widget), keyed by ``id``.

    Upstream field names are camelCase; aliases accept and re-emit them so a
    cached snapshot serializes exactly like the upstream payload.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    # Core identification
    id: str = Field(..., min_length=1)
    name: str = ""
    slug: str = ""

    # Timestamps (ISO strings, kept verbatim)
    created_at: str | None = None
    updated_at: str | None = None
    published_at: str | None = None

    # Essential metrics
    number_of_locations: int | None = None
    number_of_locations_source: str | None = None

    # Feature adoption
    display_images: bool = False
    layout: str = ""
    is_order_button_enabled: bool = False
    is_byo_enabled: bool = False
    is_active: bool | None = None
    is_sync_enabled: bool | None = None
    last_synced_at: str | None = None

    # Chain classifications (warehouse only; snake_case upstream)
    chain_nra_classifications: list[NraClassification] | None = Field(
        default=None, alias="chain_nra_classifications"
    )
    chain_menu_classifications: list[MenuClassification] | None = Field(
        default=None, alias="chain_menu_classifications"
    )
    chain_cuisine_classifications: list[CuisineClassification] | None = Field(
        default=None, alias="chain_cuisine_classifications"
    )

    # Branding
    primary_brand_color: str | None = None
    highlight_color: str | None = None
    background_color: str | None = None
    order_url: str | None = None
    supported_allergens: list[str] | None = None

    # CTA flags
    display_soft_sign_up: bool | None = None
    display_notify_me_banner: bool | None = None
    display_give_feedback_banner: bool | None = None
    display_feedback_button: bool | None = None
    display_dish_details_link: bool | None = None

    analytics: EntityAnalytics | None = None

    @property
    def is_published(self) -> bool:
        return bool(self.published_at)
