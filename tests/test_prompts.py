from app.schemas.team import TeamDraft
from app.utils.prompts import build_logo_prompt, is_animal, style_name
from app.utils.teams import normalize_team


def make_team(**fields):
    defaults = {"name": "Blue Wolves", "primary": "#00338D", "secondary": "red", "seed": 10, "style": 0}
    defaults.update(fields)
    return normalize_team(TeamDraft(**defaults))


def test_animal_prompt():
    prompt = build_logo_prompt(make_team(mascot="wolf"))
    assert '"wolf"' in prompt
    assert "animal head" in prompt
    assert "front-facing mascot head" in prompt
    assert "#00338D" in prompt
    assert "secondary red (red)" in prompt


def test_object_prompt():
    prompt = build_logo_prompt(make_team(name="Boom Squad", mascot="grenade"))
    assert "depict a single object" in prompt
    assert "object-only emblem" in prompt


def test_style_changes_prompt():
    a = build_logo_prompt(make_team(style=0))
    b = build_logo_prompt(make_team(style=4))
    assert a != b
    assert "chunky simplified shapes" in b


def test_invalid_color_is_white_in_prompt():
    team = make_team(primary="banana")
    prompt = build_logo_prompt(team)
    assert "primary white (#FFFFFF)" in prompt


def test_helpers():
    assert is_animal("Snarling Wolf")
    assert not is_animal("grenade")
    assert style_name(1) == "Geometric"
