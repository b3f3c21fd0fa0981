"""
Variant resolution for products that share a vertical.

When a shopper picks a different storage, RAM or colour, the sibling to
navigate to is chosen by a priority cascade over the attributes the
current product already has, most specific match first:

1. the new value plus both other current attributes (only when both are set)
2. the new value plus one other current attribute, in a fixed per-attribute
   order (each level only when that attribute is set)
3. the first sibling carrying the new value

The same cascade serves all three attributes; only the fallback order of
the "other" attributes differs.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from app.enums.catalog import VariantAttribute
from app.schemas.variant import VariantOption, VariantSelector

logger = logging.getLogger(__name__)

VARIANT_ATTRIBUTES: Tuple[str, ...] = tuple(a.value for a in VariantAttribute)

FALLBACK_ORDER: Dict[str, Tuple[str, str]] = {
    VariantAttribute.storage.value: (VariantAttribute.colour.value, VariantAttribute.ram.value),
    VariantAttribute.ram.value: (VariantAttribute.storage.value, VariantAttribute.colour.value),
    VariantAttribute.colour.value: (VariantAttribute.storage.value, VariantAttribute.ram.value),
}

SELECTOR_LABELS: Dict[str, str] = {
    VariantAttribute.storage.value: "Storage",
    VariantAttribute.ram.value: "RAM",
    VariantAttribute.colour.value: "Colour",
}

NUMERICALLY_SORTED = {VariantAttribute.storage.value, VariantAttribute.ram.value}

_LEADING_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_HEX_COLOUR = re.compile(r"^[0-9A-Fa-f]{6}$")


def attr(item: Any, name: str) -> Optional[str]:
    """Reads an attribute from a mapping (API JSON) or an object (ORM / pydantic)."""
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _check_attribute(attribute: str) -> None:
    if attribute not in FALLBACK_ORDER:
        raise ValueError(f"Unknown variant attribute: {attribute!r}")


def _specificity_levels(current: Any, others: Sequence[str]) -> Iterable[Tuple[str, ...]]:
    held = [name for name in others if attr(current, name)]
    if len(held) == len(others):
        yield tuple(others)
    for name in held:
        yield (name,)
    yield ()


def resolve_variant(
    variants: Sequence[Any],
    current: Any,
    attribute: str,
    value: str,
) -> Optional[Any]:
    """
    Best sibling for `attribute` switched to `value`, or None when no
    sibling carries that value at all.
    """
    _check_attribute(attribute)
    candidates = [v for v in variants if attr(v, attribute) == value]
    if not candidates:
        return None

    for fixed in _specificity_levels(current, FALLBACK_ORDER[attribute]):
        for variant in candidates:
            if all(attr(variant, name) == attr(current, name) for name in fixed):
                if fixed:
                    logger.debug("Variant %s matched %s=%s keeping %s", attr(variant, "key_name"), attribute, value, fixed)
                return variant
    return None


def _numeric_key(value: str) -> float:
    match = _LEADING_NUMBER.search(value)
    return float(match.group()) if match else 0.0


def unique_values(variants: Iterable[Any], attribute: str) -> List[str]:
    """
    Distinct non-empty values in first-seen order; storage and RAM are then
    sorted by their leading number ("8GB" < "128GB").
    """
    _check_attribute(attribute)
    values: List[str] = []
    for variant in variants:
        value = attr(variant, attribute)
        if value and value not in values:
            values.append(value)

    if attribute in NUMERICALLY_SORTED:
        values.sort(key=_numeric_key)
    return values


def colour_swatch(value: Optional[str]) -> Optional[str]:
    if value and _HEX_COLOUR.match(value):
        return f"#{value}"
    return None


def build_variant_selectors(variants: Sequence[Any], current: Any) -> List[VariantSelector]:
    """
    One selector per attribute. An attribute no sibling has is left out
    entirely rather than rendered as an empty control.
    """
    selectors = []
    for attribute in VARIANT_ATTRIBUTES:
        values = unique_values(variants, attribute)
        if not values:
            continue

        options = []
        for value in values:
            first = next(v for v in variants if attr(v, attribute) == value)
            options.append(
                VariantOption(
                    value=value,
                    key_name=attr(first, "key_name"),
                    active=value == attr(current, attribute),
                    swatch=colour_swatch(value) if attribute == VariantAttribute.colour.value else None,
                )
            )
        selectors.append(
            VariantSelector(attribute=attribute, label=SELECTOR_LABELS[attribute], options=options)
        )
    return selectors


def product_url(key_name: str) -> str:
    return f"/product/{key_name}"


def switch_variant(
    variants: Sequence[Any],
    current: Any,
    attribute: str,
    value: str,
) -> Optional[str]:
    """
    Navigation target for a variant switch. None leaves the shopper on the
    current variant.
    """
    match = resolve_variant(variants, current, attribute, value)
    if match is None:
        logger.error("No variant found for %s: %s", attribute, value)
        return None
    return product_url(attr(match, "key_name"))
