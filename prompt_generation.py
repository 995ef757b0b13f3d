"""
YouTube Thumbnail Studio - Prompt Generation Module
==================================================
Turns structured form state into natural-language instructions for Gemini:

- build_thumbnail_prompt: instruction for the image model (one thumbnail)
- build_suggestion_prompt: instruction for the text model (brainstormed ideas)
- SUGGESTION_RESPONSE_SCHEMA: structured-output schema for the suggestions

Every enum value has a fixed, hand-written guidance string. The tables are
checked for completeness when the module is imported.
"""

from enum import Enum
from typing import Union

from config import NUM_SUGGESTIONS
from schemas import (
    Brightness,
    ImageReaction,
    Mood,
    RefinementSet,
    ThumbnailRequest,
    ThumbnailStyle,
    enum_values,
)


# =============================================================================
# GUIDANCE TABLES
# =============================================================================

MOOD_GUIDANCE = {
    Mood.ENERGETIC: (
        "EXTREMELY HIGH ENERGY. Use vibrant, neon, saturated colors like electric blues "
        "and hot pinks. Add dynamic motion lines, light streaks or glowing particles. "
        "Everything should feel loud, fast and exciting."
    ),
    Mood.DRAMATIC: (
        "CINEMATIC & SERIOUS. Create a high-contrast scene with deep shadows and strong "
        "highlights. Use moody, desaturated tones with a single bold accent color and "
        "directional, film-like lighting."
    ),
    Mood.PROFESSIONAL: (
        "CLEAN & POLISHED. Design a minimalist and modern layout with generous negative "
        "space, a restrained color palette, crisp lighting and precise alignment. "
        "Trustworthy and corporate, never cluttered."
    ),
    Mood.FUNNY: (
        "PLAYFUL & COMICAL. Use bright, candy-like colors. Exaggerated expressions, "
        "cartoonish accents such as emoji-style reactions or comic bursts, and a "
        "lighthearted, slightly absurd composition."
    ),
    Mood.INSPIRATIONAL: (
        "UPLIFTING & HOPEFUL. Use soft, warm lighting, bright and optimistic colors, "
        "golden-hour glow or rays of light, and an open, airy composition that "
        "suggests growth and possibility."
    ),
}

REACTION_GUIDANCE = {
    ImageReaction.SURPRISED: "Wide eyes, raised eyebrows and an open mouth, clearly shocked.",
    ImageReaction.EXCITED: "Big genuine smile, bright eyes and energetic body language.",
    ImageReaction.THOUGHTFUL: "Calm, focused gaze, slight head tilt, a hand near the chin.",
    ImageReaction.HAPPY: "Warm, relaxed smile with friendly, approachable eyes.",
    ImageReaction.INTENSE: "Narrowed eyes, firm jaw and a determined, piercing stare.",
}

STYLE_GUIDANCE = {
    ThumbnailStyle.REALISTIC: (
        "Photorealistic rendering with natural skin tones, sharp focus and professional "
        "studio-quality lighting."
    ),
    ThumbnailStyle.DRAWING: (
        "Hand-crafted digital illustration with clean linework, painterly shading and "
        "a rich, cohesive palette."
    ),
    ThumbnailStyle.CARTOON: (
        "Animated cartoon look with bold outlines, flat vibrant colors and exaggerated, "
        "expressive shapes."
    ),
    ThumbnailStyle.THREE_D_RENDER: (
        "Polished 3D render with soft global illumination, glossy materials and depth "
        "of field."
    ),
    ThumbnailStyle.PIXEL_ART: (
        "Retro pixel art with a limited palette, crisp square pixels and no "
        "anti-aliasing."
    ),
}

BRIGHTNESS_INSTRUCTIONS = {
    Brightness.BRIGHTER: "Make the whole image noticeably brighter while keeping strong contrast.",
    Brightness.DARKER: "Make the whole image noticeably darker and moodier while keeping the subject readable.",
}


def _check_complete(table: dict, enum_cls: type[Enum]) -> None:
    """Raise if a guidance table does not cover every enum value."""
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise ValueError(f"Missing {enum_cls.__name__} guidance for: {', '.join(missing)}")


def validate_guidance_tables() -> None:
    """Every closed enumeration must map to a guidance string."""
    _check_complete(MOOD_GUIDANCE, Mood)
    _check_complete(REACTION_GUIDANCE, ImageReaction)
    _check_complete(STYLE_GUIDANCE, ThumbnailStyle)
    missing = [b.value for b in Brightness if b != Brightness.NORMAL and b not in BRIGHTNESS_INSTRUCTIONS]
    if missing:
        raise ValueError(f"Missing Brightness instructions for: {', '.join(missing)}")


def _lookup(table: dict, enum_cls: type[Enum], value: Union[Enum, str]) -> str:
    """Fail fast on values outside the closed set instead of defaulting."""
    try:
        member = enum_cls(value)
    except ValueError:
        raise ValueError(f"Unknown {enum_cls.__name__}: {value!r}") from None
    return table[member]


def get_mood_guidance(mood: Union[Mood, str]) -> str:
    return _lookup(MOOD_GUIDANCE, Mood, mood)


def get_reaction_guidance(reaction: Union[ImageReaction, str]) -> str:
    return _lookup(REACTION_GUIDANCE, ImageReaction, reaction)


def get_style_guidance(style: Union[ThumbnailStyle, str]) -> str:
    return _lookup(STYLE_GUIDANCE, ThumbnailStyle, style)


validate_guidance_tables()


# =============================================================================
# THUMBNAIL PROMPT
# =============================================================================

ASPECT_RATIO_REQUIREMENT = (
    "**CRITICAL REQUIREMENT:** The final output image MUST have a 16:9 aspect ratio "
    "(landscape, 1280x720). Do not produce a square or vertical image."
)

FINAL_OUTPUT_INSTRUCTIONS = """**Final Output:**
Produce one complete 16:9 image. Ensure the aspect ratio is exactly 16:9.
No watermarks, logos, signatures or placeholder text; the title is the only text in the image.
The thumbnail must be ready for YouTube upload."""


def build_refinement_section(refinements: RefinementSet) -> str:
    """
    Instruction block listing only the refinement fields that differ from
    their defaults. Returns an empty string for a neutral refinement set.
    """
    if not refinements.is_active:
        return ""

    lines = ["**Refinement Instructions:**"]
    if refinements.brightness != Brightness.NORMAL:
        lines.append(
            f"- Adjust brightness: {refinements.brightness.value}. "
            f"{BRIGHTNESS_INSTRUCTIONS[refinements.brightness]}"
        )
    if refinements.color.strip():
        lines.append(f"- Use color palette: {refinements.color.strip()}.")
    if refinements.layout.strip():
        lines.append(f"- Layout instruction: {refinements.layout.strip()}.")
    return "\n".join(lines)


def build_thumbnail_prompt(request: ThumbnailRequest) -> str:
    """
    Build the instruction sent to the image model together with the
    reference image.

    The 16:9 requirement is stated at the start and again at the end.
    """
    mood_guidance = get_mood_guidance(request.mood)
    reaction_guidance = get_reaction_guidance(request.image_reaction)
    style_guidance = get_style_guidance(request.thumbnail_style)

    mood = Mood(request.mood).value
    reaction = ImageReaction(request.image_reaction).value
    style = ThumbnailStyle(request.thumbnail_style).value

    sections = [
        "You are an expert YouTube thumbnail designer, a master of viral aesthetics. "
        "Your mission is to turn the provided photo into a visually stunning, "
        "high-contrast thumbnail that grabs attention.",
        ASPECT_RATIO_REQUIREMENT,
        f"""1. **Background:** Replace the ENTIRE background with: "{request.background_concept}".
   Preserve the original subject perfectly: keep their pixels, identity and features unchanged.
   If the subject is a person, their full face must remain completely visible and uncropped.
2. **Title text:** Render the title "{request.title}" exactly as written.
   Use bold, high-legibility sans-serif typography (e.g., Bebas Neue, Impact, Montserrat ExtraBold).
   Give it strong contrast with a thick outline, drop shadow or solid background box.
   The title must sit fully inside the frame and must never be cropped.
3. **Concept:** The overall visual theme must communicate: "{request.concept}".
4. **Mood:** Maintain a **{mood}** mood. Style guide: {mood_guidance}
5. **Artistic style:** **{style}**. {style_guidance}
6. **Subject's expression:** **{reaction}**. {reaction_guidance}
7. **Composition:** Dynamic, exciting and professional, with a clear focal point that reads at small sizes.""",
    ]

    if request.refinements is not None:
        refinement_section = build_refinement_section(request.refinements)
        if refinement_section:
            sections.append(refinement_section)

    sections.append(FINAL_OUTPUT_INSTRUCTIONS)
    return "\n\n".join(sections)


# =============================================================================
# SUGGESTION PROMPT
# =============================================================================

SUGGESTION_FIELDS = ["title", "backgroundConcept", "mood", "imageReaction", "thumbnailStyle"]


def build_suggestion_schema(count: int = NUM_SUGGESTIONS) -> dict:
    """Structured-output schema: an array of `count` suggestion objects."""
    return {
        "type": "ARRAY",
        "min_items": count,
        "max_items": count,
        "items": {
            "type": "OBJECT",
            "properties": {
                "title": {
                    "type": "STRING",
                    "description": "Short, punchy text to display on the thumbnail",
                },
                "backgroundConcept": {
                    "type": "STRING",
                    "description": "One vivid sentence describing the background scene",
                },
                "mood": {
                    "type": "STRING",
                    "enum": enum_values(Mood),
                },
                "imageReaction": {
                    "type": "STRING",
                    "enum": enum_values(ImageReaction),
                },
                "thumbnailStyle": {
                    "type": "STRING",
                    "enum": enum_values(ThumbnailStyle),
                },
            },
            "required": list(SUGGESTION_FIELDS),
            "property_ordering": list(SUGGESTION_FIELDS),
        },
    }


SUGGESTION_RESPONSE_SCHEMA = build_suggestion_schema(NUM_SUGGESTIONS)


def build_suggestion_prompt(video_description: str, count: int = NUM_SUGGESTIONS) -> str:
    """Build the brainstorming instruction for the text model."""
    moods = ", ".join(enum_values(Mood))
    reactions = ", ".join(enum_values(ImageReaction))
    styles = ", ".join(enum_values(ThumbnailStyle))
    fields = ", ".join(SUGGESTION_FIELDS)

    return f"""You are an expert YouTube strategist who designs high click-through thumbnails.
Based on the video description below, generate exactly {count} distinct thumbnail ideas.

## VIDEO DESCRIPTION
{video_description.strip()}

## FIELDS FOR EACH IDEA
- title: short, punchy text for the thumbnail itself (2-6 words)
- backgroundConcept: one vivid sentence describing the background scene
- mood: exactly one of: {moods}
- imageReaction: exactly one of: {reactions}
- thumbnailStyle: exactly one of: {styles}

Use ONLY the values listed above for mood, imageReaction and thumbnailStyle, spelled exactly as shown.
Make the {count} ideas clearly different from each other.

## OUTPUT FORMAT
Respond with a JSON array of exactly {count} objects. Each object has exactly these keys:
{fields}.
Return only the JSON array, with no markdown and no commentary."""
