"""
Team construction helpers: normalization, mascot derivation, palettes.

All defaulting happens in ``normalize_team`` so the rest of the code can rely
on a fully populated ``Team``.
"""
import random
from typing import Any, Dict, List, Optional, Set

from app.schemas.team import Team, TeamDraft, TeamUpdate
from app.utils.colors import sanitize_color

STYLE_COUNT = 6
MAX_RANDOM_SEED = 10_000

NFL_PALETTE: List[Dict[str, str]] = [
    {"name": "Chiefs", "primary": "#E31837", "secondary": "#FFB612"},
    {"name": "Packers", "primary": "#203731", "secondary": "#FFB612"},
    {"name": "Bears", "primary": "#0B162A", "secondary": "#C83803"},
    {"name": "Broncos", "primary": "#0A2342", "secondary": "#FB4F14"},
    {"name": "Seahawks", "primary": "#002244", "secondary": "#69BE28"},
    {"name": "Vikings", "primary": "#4F2683", "secondary": "#FFC62F"},
    {"name": "Dolphins", "primary": "#008E97", "secondary": "#FC4C02"},
    {"name": "49ers", "primary": "#AA0000", "secondary": "#B3995D"},
    {"name": "Raiders", "primary": "#000000", "secondary": "#A5ACAF"},
    {"name": "Cowboys", "primary": "#041E42", "secondary": "#869397"},
    {"name": "Giants", "primary": "#0B2265", "secondary": "#A71930"},
    {"name": "Bills", "primary": "#00338D", "secondary": "#C60C30"},
    {"name": "Jets", "primary": "#125740", "secondary": "#FFFFFF"},
    {"name": "Ravens", "primary": "#241773", "secondary": "#000000"},
    {"name": "Panthers", "primary": "#0085CA", "secondary": "#101820"},
    {"name": "Jaguars", "primary": "#006778", "secondary": "#9F792C"},
    {"name": "Saints", "primary": "#101820", "secondary": "#D3BC8D"},
    {"name": "Patriots", "primary": "#002244", "secondary": "#C60C30"},
    {"name": "Buccaneers", "primary": "#D50A0A", "secondary": "#34302B"},
    {"name": "Chargers", "primary": "#0073CF", "secondary": "#FFC20E"},
]

# Plural / nickname keyword -> singular mascot; checked in order
MASCOT_KEYWORDS = {
    "bears": "bear", "cubs": "bear",
    "lions": "lion", "tigers": "tiger",
    "wolves": "wolf", "wolfpack": "wolf", "timberwolves": "wolf",
    "eagles": "eagle", "hawks": "hawk", "falcons": "falcon",
    "ravens": "raven", "crows": "raven",
    "broncos": "stallion", "mustangs": "stallion", "colts": "stallion", "horses": "stallion",
    "panthers": "panther", "jaguars": "jaguar", "leopards": "leopard",
    "sharks": "shark", "dolphins": "dolphin",
    "bulls": "bull", "bison": "bison", "buffaloes": "bison",
    "vikings": "viking", "knights": "knight", "pirates": "pirate", "buccaneers": "pirate",
    "rams": "ram", "foxes": "fox", "gorillas": "gorilla", "gators": "alligator",
    "crocodiles": "crocodile", "dragons": "dragon",
}

FALLBACK_MASCOTS = [
    "wolf", "bear", "eagle", "hawk", "dragon", "knight", "viking", "pirate", "bull",
    "tiger", "panther", "raven", "shark", "stallion", "bison", "ram", "fox", "gorilla",
]

DEMO_TEAMS: List[Dict[str, Any]] = [
    {"mascot": "wolf", "primary": "#00338D", "secondary": "#C60C30", "seed": 7123, "name": "Blue Wolves"},
    {"mascot": "eagle", "primary": "#203731", "secondary": "#FFB612", "seed": 8142, "name": "Verdant Eagles"},
    {"mascot": "tiger", "primary": "#0B162A", "secondary": "#C83803", "seed": 5177, "name": "Night Tigers"},
    {"mascot": "stallion", "primary": "#0A2342", "secondary": "#FB4F14", "seed": 4409, "name": "Mile High"},
    {"mascot": "raven", "primary": "#241773", "secondary": "#000000", "seed": 1903, "name": "Ravencrest"},
    {"mascot": "panther", "primary": "#0085CA", "secondary": "#101820", "seed": 6611, "name": "Carolina"},
    {"mascot": "jaguar", "primary": "#006778", "secondary": "#9F792C", "seed": 3302, "name": "Teal Fangs"},
    {"mascot": "shark", "primary": "#002244", "secondary": "#69BE28", "seed": 9281, "name": "Sound Sharks"},
    {"mascot": "knight", "primary": "#4F2683", "secondary": "#FFC62F", "seed": 2845, "name": "Violet Knights"},
    {"mascot": "bear", "primary": "#AA0000", "secondary": "#B3995D", "seed": 1199, "name": "Gold Bears"},
    {"mascot": "viking", "primary": "#4F2683", "secondary": "#FFC62F", "seed": 4040, "name": "Nordic"},
    {"mascot": "bison", "primary": "#125740", "secondary": "#FFFFFF", "seed": 9555, "name": "Prairie Bison"},
]


def derive_mascot(name: str) -> Optional[str]:
    """Guess a mascot from keywords in the team name, or None."""
    n = (name or "").lower()
    for key, mascot in MASCOT_KEYWORDS.items():
        if key in n:
            return mascot
    for mascot in FALLBACK_MASCOTS:
        if mascot in n:
            return mascot
    return None


def random_seed(rng: random.Random = None) -> int:
    return (rng or random).randint(1, MAX_RANDOM_SEED)


def sanitize_seed(value: Any, rng: random.Random = None) -> int:
    """
    Missing seed -> random 1..10000; non-numeric or < 1 -> 1.
    """
    if value is None or value == "":
        return random_seed(rng)
    try:
        seed = int(str(value).strip())
    except (TypeError, ValueError):
        return 1
    return seed if seed >= 1 else 1


def sanitize_style(value: Any, seed: int) -> int:
    """Valid 0..5 index passes through; anything else follows the seed."""
    try:
        style = int(value)
    except (TypeError, ValueError):
        return seed % STYLE_COUNT
    if isinstance(value, float) and value != style:
        return seed % STYLE_COUNT
    return style if 0 <= style < STYLE_COUNT else seed % STYLE_COUNT


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def normalize_team(draft: TeamDraft, index: int = 0, rng: random.Random = None) -> Team:
    """
    Build a complete team from loose input.

    ``index`` is the team's position in its league; it picks the default id,
    name and palette entry.
    """
    name = _clean(draft.name) or f"Team {index + 1}"
    base = NFL_PALETTE[index % len(NFL_PALETTE)]
    seed = sanitize_seed(draft.seed, rng)

    return Team(
        id=_clean(draft.id) or str(index + 1),
        name=name,
        owner=_clean(draft.owner),
        mascot=_clean(draft.mascot) or derive_mascot(name) or name,
        primary=sanitize_color(draft.primary) if _clean(draft.primary) else base["primary"],
        secondary=sanitize_color(draft.secondary) if _clean(draft.secondary) else base["secondary"],
        seed=seed,
        style=sanitize_style(draft.style, seed),
        logo_url=_clean(draft.logo_url),
    )


def next_free_id(taken: Set[str], start: int) -> str:
    """First ``str(n)`` with n >= start that no team uses yet."""
    n = max(start, 1)
    while str(n) in taken:
        n += 1
    return str(n)


def apply_update(team: Team, patch: TeamUpdate) -> Team:
    """Apply an edit patch, sanitizing only the fields it sets."""
    fields = patch.model_dump(exclude_unset=True)
    changes: Dict[str, Any] = {}

    if "name" in fields:
        changes["name"] = _clean(fields["name"]) or team.name
    if "owner" in fields:
        changes["owner"] = _clean(fields["owner"])
    if "mascot" in fields:
        changes["mascot"] = _clean(fields["mascot"]) or changes.get("name", team.name)
    if "primary" in fields:
        changes["primary"] = sanitize_color(fields["primary"])
    if "secondary" in fields:
        changes["secondary"] = sanitize_color(fields["secondary"])
    if "seed" in fields:
        # An explicitly empty seed field is treated as invalid, not as "pick one"
        changes["seed"] = sanitize_seed(fields["seed"]) if fields["seed"] not in (None, "") else 1
    if "style" in fields:
        changes["style"] = sanitize_style(fields["style"], changes.get("seed", team.seed))

    return team.model_copy(update=changes)


def apply_nfl_palette(teams: List[Team]) -> List[Team]:
    """Team i gets palette entry i mod len(NFL_PALETTE)."""
    result = []
    for i, team in enumerate(teams):
        p = NFL_PALETTE[i % len(NFL_PALETTE)]
        result.append(team.model_copy(update={"primary": p["primary"], "secondary": p["secondary"]}))
    return result


def remix_palette(teams: List[Team], rng: random.Random = None) -> List[Team]:
    chooser = rng or random
    result = []
    for team in teams:
        p = chooser.choice(NFL_PALETTE)
        result.append(team.model_copy(update={"primary": p["primary"], "secondary": p["secondary"]}))
    return result


def demo_teams() -> List[Team]:
    return [
        normalize_team(TeamDraft(id=str(i + 1), owner="Demo", **sample), index=i)
        for i, sample in enumerate(DEMO_TEAMS)
    ]
