"""Style profile extraction, used to keep edits consistent with an established page style."""

import re

from pagewright.models import StyleProfile

FONT_FAMILY_RE = re.compile(r"font-family:\s*['\"]?([^;'\"]+)['\"]?", re.IGNORECASE)
PADDING_RE = re.compile(r"padding:\s*(\d+)", re.IGNORECASE)
BACKGROUND_HEX_RE = re.compile(r"background(?:-color)?:\s*#([0-9a-f]{3,6})", re.IGNORECASE)
SHARP_RADIUS_RE = re.compile(r"border-radius:\s*0(?![\d.])", re.IGNORECASE)

DEFAULT_PADDING = 16


def extract_style_profile(html: str) -> StyleProfile:
    profile = StyleProfile()

    font_match = FONT_FAMILY_RE.search(html)
    if font_match:
        profile.font_family = font_match.group(1).split(",")[0].strip()

    paddings = [int(value) for value in PADDING_RE.findall(html)]
    avg_padding = sum(paddings) / len(paddings) if paddings else DEFAULT_PADDING
    if avg_padding < 12:
        profile.spacing_density = "compact"
    elif avg_padding > 24:
        profile.spacing_density = "relaxed"
    else:
        profile.spacing_density = "normal"

    background_match = BACKGROUND_HEX_RE.search(html)
    if background_match:
        # Red channel of the first background colour as a rough luminance
        luminance = int(background_match.group(1)[:2], 16)
        profile.color_tone = "dark" if luminance < 100 else "light"

    if SHARP_RADIUS_RE.search(html):
        profile.border_style = "sharp"
    elif "border-radius" in html:
        profile.border_style = "rounded"
    else:
        profile.border_style = "none"

    return profile


def style_hints(profile: StyleProfile) -> str:
    """Render a profile as prompt hints, or an empty string when nothing is known"""
    hints = []
    if profile.font_family:
        hints.append(f"Continue using the {profile.font_family} font family")
    if profile.spacing_density:
        hints.append(f"Maintain {profile.spacing_density} spacing density")
    if profile.color_tone:
        hints.append(f"Keep the {profile.color_tone} color tone")
    if profile.border_style:
        hints.append(f"Use {profile.border_style} border styling")

    if not hints:
        return ""
    return "\n\nSTYLE CONSISTENCY REQUIREMENTS:\n" + "\n".join(f"- {h}" for h in hints)
