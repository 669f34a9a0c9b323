"""Style intensity profiles and instruction compilation.

Each of the three stroke intensities maps to one fixed description of a period
in Van Gogh's work. The description is dropped into a fixed instruction
template that tells the model to repaint the photo rather than filter it.

Template Structure::

    You are Vincent Van Gogh. Re-paint the provided image in your signature
    oil painting style.

    Target Style: ...
    Technique: ...
    Brushstrokes: ...
    Colors: ...
    Vibe: ...

    CRITICAL INSTRUCTIONS:
    1. ... 4. ...

Usage
-----
::

    instruction = build_instruction(StyleIntensity.HIGH)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class StyleIntensity(str, Enum):
    """Stroke intensity selector. Values are the labels shown in the UI."""

    LOW = "Textured Impasto"
    MEDIUM = "Vibrant Arles"
    HIGH = "Starry Night Swirls"


DEFAULT_INTENSITY = StyleIntensity.MEDIUM


@dataclass(frozen=True)
class StyleProfile:
    """Painting technique bound to one intensity level."""

    target_style: str
    technique: str
    brushstrokes: str
    colors: str
    vibe: str

    def describe(self) -> str:
        """Render the profile as the descriptive block of an instruction."""
        return "\n".join(
            [
                f"Target Style: {self.target_style}",
                f"Technique: {self.technique}",
                f"Brushstrokes: {self.brushstrokes}",
                f"Colors: {self.colors}",
                f"Vibe: {self.vibe}",
            ]
        )


STYLE_PROFILES: MappingProxyType[StyleIntensity, StyleProfile] = MappingProxyType(
    {
        StyleIntensity.LOW: StyleProfile(
            target_style="Early Van Gogh / Realistic Impasto.",
            technique="Use heavy, visible brushwork and thick paint texture (impasto).",
            brushstrokes="Short, hatched, distinct strokes that define form and volume.",
            colors=(
                "Use somewhat naturalistic but saturated earthy tones "
                "(ochres, siennas, olive greens)."
            ),
            vibe="Raw, textured, tactile, and grounded. Focus on the physicality of the paint.",
        ),
        StyleIntensity.MEDIUM: StyleProfile(
            target_style="Classic Van Gogh (Arles period).",
            technique=(
                "The quintessential Post-Impressionist oil painting style "
                "with thick paint application."
            ),
            brushstrokes="Rhythmic, directional dashes that follow the contours of the subjects.",
            colors=(
                "Vibrant complementary colors "
                "(Chrome Yellow, Prussian Blue, Viridian, Vermilion)."
            ),
            vibe=(
                "Bright, vibrating with light, and emotionally charged. "
                "The image must look like a painting, not a photo."
            ),
        ),
        StyleIntensity.HIGH: StyleProfile(
            target_style="Late Van Gogh / Saint-Rémy ('The Starry Night' era).",
            technique="Extreme distortion, exaggerated emotion, and dynamic movement.",
            brushstrokes=(
                "Long, swirling, turbulent lines that flow like liquid. "
                "The background should swirl dynamically."
            ),
            colors="Intense, hallucinatory contrasts (deep cobalt blues vs. glowing yellows).",
            vibe="Emotional, turbulent, dream-like, and visionary.",
        ),
    }
)

_INSTRUCTION_HEADER = (
    "You are Vincent Van Gogh. Re-paint the provided image in your signature "
    "oil painting style."
)

_CRITICAL_INSTRUCTIONS = "\n".join(
    [
        "CRITICAL INSTRUCTIONS:",
        "1. Maintain the original composition and subject matter.",
        "2. Render every pixel as if it were thick oil paint on canvas.",
        "3. Ensure brushstrokes are clearly visible, thick, and directional.",
        "4. Do not just apply a filter; completely reimagine the texture and light.",
    ]
)


def get_style_profile(intensity: StyleIntensity | str | None) -> StyleProfile:
    """Look up the profile for an intensity.

    Accepts the enum, its value (UI label) or its name. Anything unrecognized
    falls back to the classic Arles profile.
    """
    if isinstance(intensity, StyleIntensity):
        return STYLE_PROFILES[intensity]

    if isinstance(intensity, str):
        for member in StyleIntensity:
            if intensity in (member.value, member.name):
                return STYLE_PROFILES[member]

    return STYLE_PROFILES[DEFAULT_INTENSITY]


def build_instruction(intensity: StyleIntensity | str | None) -> str:
    """Compile the full instruction text sent alongside the image."""
    sections = [
        _INSTRUCTION_HEADER,
        get_style_profile(intensity).describe(),
        _CRITICAL_INSTRUCTIONS,
    ]
    return "\n\n".join(sections)
