"""
Validated description of a SmartMenu settings mutation.

Mutation handlers report what they changed upstream through this closed
type; anything outside MutableField is rejected at the call boundary.
"""

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..core.exceptions import ValidationError


class MutableField(str, Enum):
    """EntitySettings fields that a mutation may change."""

    NAME = "name"
    SLUG = "slug"
    PUBLISHED_AT = "published_at"
    NUMBER_OF_LOCATIONS = "number_of_locations"
    DISPLAY_IMAGES = "display_images"
    LAYOUT = "layout"
    IS_ORDER_BUTTON_ENABLED = "is_order_button_enabled"
    IS_BYO_ENABLED = "is_byo_enabled"
    PRIMARY_BRAND_COLOR = "primary_brand_color"
    HIGHLIGHT_COLOR = "highlight_color"
    BACKGROUND_COLOR = "background_color"
    ORDER_URL = "order_url"
    SUPPORTED_ALLERGENS = "supported_allergens"
    DISPLAY_SOFT_SIGN_UP = "display_soft_sign_up"
    DISPLAY_NOTIFY_ME_BANNER = "display_notify_me_banner"
    DISPLAY_GIVE_FEEDBACK_BANNER = "display_give_feedback_banner"
    DISPLAY_FEEDBACK_BUTTON = "display_feedback_button"
    DISPLAY_DISH_DETAILS_LINK = "display_dish_details_link"

    @classmethod
    def lookup(cls, name: "str | MutableField") -> "MutableField":
        """Resolve a snake_case or upstream camelCase field name."""
        if isinstance(name, MutableField):
            return name
        by_name = _FIELD_NAMES.get(name)
        if by_name is None:
            raise ValueError(f"'{name}' is not a mutable settings field")
        return by_name


_FIELD_NAMES: dict[str, MutableField] = {}
for _field in MutableField:
    _FIELD_NAMES[_field.value] = _field
    _FIELD_NAMES[to_camel(_field.value)] = _field


class SettingsMutation(BaseModel):
    """A change to one entity, as reported by a mutation handler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entity_id: str = Field(..., min_length=1)
    changed_fields: frozenset[MutableField] = Field(..., min_length=1)

    @field_validator("entity_id")
    @classmethod
    def _strip_entity_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("entity_id must not be blank")
        return value

    @field_validator("changed_fields", mode="before")
    @classmethod
    def _resolve_field_names(cls, value: object) -> frozenset[MutableField]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, Iterable):
            raise ValueError("changed_fields must be a collection of field names")
        return frozenset(MutableField.lookup(name) for name in value)

    @classmethod
    def from_fields(
        cls,
        entity_id: str,
        changed_fields: "Iterable[str | MutableField]",
    ) -> "SettingsMutation":
        """
        Build a mutation, translating schema failures into ValidationError.

        Raises:
            ValidationError: Blank id, empty field set or unknown field name
        """
        try:
            return cls(entity_id=entity_id, changed_fields=changed_fields)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid settings mutation",
                entity_id=entity_id,
                errors=[err["msg"] for err in e.errors()],
            ) from e

    @property
    def field_names(self) -> list[str]:
        return sorted(f.value for f in self.changed_fields)
