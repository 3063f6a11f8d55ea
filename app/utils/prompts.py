"""
Prompt templates for team logo generation
"""
from app.schemas.team import Team
from app.utils.colors import color_name, sanitize_color

# Subjects that get an "animal head" composition instead of an object emblem
ANIMALS = [
    "wolf", "fox", "lion", "tiger", "bear", "bull", "ram", "eagle", "hawk", "falcon", "owl", "shark",
    "panther", "jaguar", "leopard", "cougar", "cat", "dog", "husky", "stallion", "mustang", "horse",
    "gorilla", "ape", "monkey", "dragon", "viper", "cobra", "raven", "crow", "cardinal", "dolphin",
    "bison", "buffalo", "coyote", "wolverine", "otter", "gator", "croc", "rhino", "hippo", "whale",
    "duck", "goose", "goat", "yak", "boar", "pig", "turtle", "phoenix", "griffin",
]

# Index matches Team.style (0..5); {subject} is filled per team
STYLE_PHRASES = [
    ("Modern", "{subject}, sharp angular geometry, heavy outer stroke, bold negative space, high contrast"),
    ("Geometric", "{subject}, simplified geometric primitives, symmetrical, minimal detail"),
    ("Symmetric", "{subject}, strict mirror symmetry, thick outline, balanced proportions"),
    ("Dynamic", "{subject}, forward motion cues, crisp edges, athletic energy"),
    ("Retro", "{subject}, chunky simplified shapes, flat blocks, classic patch look"),
    ("Rounded", "{subject}, soft curves, friendly geometry, smooth silhouette"),
]

LOGO_PROMPT = (
    "professional sports team logo, {style_phrase}; "
    "mascot phrase: \"{mascot}\", depict a single {kind} and no words; "
    "centered, flat vector look, crisp edges, heavy black outline, pure white (#FFFFFF) background. "
    "STRICT PALETTE: primary {primary_name} ({primary}), secondary {secondary_name} ({secondary}), "
    "plus white and black only, flat solid fills, no gradients. "
    "no text, no letters, no numbers, no border, no banner, no watermark, no scene"
)


def is_animal(text: str) -> bool:
    s = (text or "").lower()
    return any(a in s for a in ANIMALS)


def style_name(style: int) -> str:
    return STYLE_PHRASES[style % len(STYLE_PHRASES)][0]


def build_logo_prompt(team: Team) -> str:
    """Render the generation prompt for a team."""
    subject = team.mascot.strip() or team.name
    animal = is_animal(subject)
    primary = sanitize_color(team.primary)
    secondary = sanitize_color(team.secondary)

    _, phrase = STYLE_PHRASES[team.style % len(STYLE_PHRASES)]
    style_phrase = phrase.format(subject="front-facing mascot head" if animal else "object-only emblem")

    return LOGO_PROMPT.format(
        style_phrase=style_phrase,
        mascot=subject,
        kind="animal head" if animal else "object",
        primary_name=color_name(primary),
        primary=primary,
        secondary_name=color_name(secondary),
        secondary=secondary,
    )
