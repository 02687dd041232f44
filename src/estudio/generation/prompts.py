"""
Prompt assembly from a structured creative brief.
"""

from .models import CreativeControls

COUNTRY_NAMES: dict[str, str] = {
    "CO": "Colombia",
    "MX": "Mexico",
    "PA": "Panama",
    "EC": "Ecuador",
    "PE": "Peru",
    "CL": "Chile",
    "PY": "Paraguay",
    "AR": "Argentina",
    "GT": "Guatemala",
    "ES": "Espana",
}

# Pixel dimensions reported for each supported aspect ratio
ASPECT_RATIO_DIMENSIONS: dict[str, tuple[int, int]] = {
    "9:16": (1080, 1920),
    "1:1": (1024, 1024),
    "16:9": (1920, 1080),
    "4:5": (1080, 1350),
    "4:3": (1024, 768),
    "3:4": (768, 1024),
    "3:2": (1024, 683),
    "2:3": (683, 1024),
}


def dimensions_for(aspect_ratio: str | None) -> tuple[int, int] | None:
    if not aspect_ratio:
        return None
    return ASPECT_RATIO_DIMENSIONS.get(aspect_ratio)


def _price_lines(controls: CreativeControls) -> list[str]:
    symbol = controls.currency_symbol
    lines = []
    if controls.price_after:
        line = f"Offer price: {symbol}{controls.price_after}"
        if controls.price_before:
            line += f" (before {symbol}{controls.price_before}, shown struck through)"
        lines.append(line)
    if controls.price_combo_2:
        lines.append(f"2-unit combo: {symbol}{controls.price_combo_2}")
    if controls.price_combo_3:
        lines.append(f"3-unit combo: {symbol}{controls.price_combo_3}")
    return lines


def build_prompt(controls: CreativeControls, aspect_ratio: str | None = None) -> str:
    """Build a banner prompt from a creative brief.

    Only the fields present in the brief contribute a line, so partial briefs
    still produce a usable prompt.
    """
    product = controls.product_name or "the product"
    lines = [f"Professional e-commerce marketing banner for {product}."]

    if controls.product_details:
        lines.append(f"Product details: {controls.product_details}")
    if controls.sales_angle:
        lines.append(f"Sales angle: {controls.sales_angle}")
    if controls.target_avatar:
        lines.append(f"Target customer: {controls.target_avatar}")

    if controls.target_country:
        country = COUNTRY_NAMES.get(controls.target_country.upper(), controls.target_country)
        lines.append(f"Audience located in {country}; use Spanish copy localized for {country}.")

    lines.extend(_price_lines(controls))

    dimensions = dimensions_for(aspect_ratio)
    if dimensions:
        width, height = dimensions
        lines.append(f"Composition for {aspect_ratio} ({width}x{height}px).")

    if controls.additional_instructions:
        lines.append(f"Additional instructions: {controls.additional_instructions}")

    lines.append("Clean layout, legible typography, high-converting visual hierarchy.")
    return "\n".join(lines)
