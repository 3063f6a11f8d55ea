#!/usr/bin/env python3
"""
Generate, post-process and save logos for a whole league.

Sources for teams:
  - --teams FILE: JSON list of teams ({"name", "owner", "mascot", "primary", ...})
    or an object with a "teams" list (the league-import response shape)
  - --demo: the built-in sample league

Output:
  - <out>/<Team_Name>_logo.png (palette-locked, cropped) and .svg when tracing works
  - <out>/team_logos.json mapping { "<Team Name>": "<out>/<file>.png" }

Usage:
  python3 generate_league_logos.py --demo
  python3 generate_league_logos.py --teams league.json --out logos/ai
  python3 generate_league_logos.py --teams league.json --force --no-svg
"""
from __future__ import annotations
import argparse
import asyncio
import json
from pathlib import Path
from typing import Dict, List

from app.core.config import settings
from app.core.logging import logger
from app.schemas.team import Team, TeamDraft
from app.utils.batch_runner import run_batch
from app.utils.capabilities import LocalFileSaver, logo_filename, logo_stem
from app.utils.image_generation_client import ImageGenerationClient
from app.utils.logo_generation import request_logo
from app.utils.postprocess import post_process_logo
from app.utils.resources import ResourceStore
from app.utils.teams import demo_teams, normalize_team


def load_teams_file(path: Path) -> List[Team]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("teams") or []
    if not isinstance(data, list):
        raise SystemExit(f"{path} must contain a list of teams or an object with a 'teams' list")
    return [normalize_team(TeamDraft(**(item or {})), index=i) for i, item in enumerate(data)]


def load_mapping(path: Path) -> Dict[str, str]:
    if not path.is_file():
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning(f"Ignoring unreadable mapping file {path}")
        return {}


async def generate_league(
    teams: List[Team],
    out_dir: Path,
    client: ImageGenerationClient,
    vectorize: bool = True,
    force: bool = False,
) -> Dict[str, str]:
    """Generate logos for ``teams`` and return the updated name -> PNG path mapping."""
    saver = LocalFileSaver(str(out_dir))
    resources = ResourceStore()
    mapping_path = out_dir / "team_logos.json"
    mapping = load_mapping(mapping_path)

    pending = []
    for team in teams:
        dest = out_dir / logo_filename(team.name)
        if dest.exists() and not force:
            mapping[team.name] = str(dest)
            logger.info(f"[skip] {team.name} -> {dest}")
        else:
            pending.append(team)

    async def generate(team: Team) -> str:
        url = await request_logo(team, client)
        processed = await post_process_logo(
            url, team.primary, team.secondary, resources,
            vectorize=vectorize, filename_stem=logo_stem(team.name),
        )
        png_path = saver.save(processed.png.filename, resources.get(processed.png.resource_id).data)
        if processed.svg:
            saver.save(processed.svg.filename, resources.get(processed.svg.resource_id).data)
        return png_path

    result = await run_batch(
        pending,
        generate,
        key=lambda t: t.name,
        on_progress=lambda done, total: print(f"[{done}/{total}]"),
        max_concurrency=settings.BATCH_MAX_CONCURRENCY,
        max_attempts=settings.BATCH_MAX_ATTEMPTS,
        retry_delay=settings.BATCH_RETRY_DELAY,
    )

    for team, outcome in zip(pending, result.outcomes):
        if outcome.success:
            mapping[team.name] = outcome.result
            print(f"[ok] {team.name} -> {outcome.result}")
        else:
            print(f"[warn] {team.name}: {outcome.error}")

    out_dir.mkdir(parents=True, exist_ok=True)
    mapping_path.write_text(json.dumps(mapping, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"\nDone. Created {result.succeeded}, failed {result.failed}, skipped {len(teams) - len(pending)}.")
    print(f"Mapping:   {mapping_path}")
    return mapping


async def _main(args) -> int:
    if args.demo:
        teams = demo_teams()
    elif args.teams:
        teams = load_teams_file(Path(args.teams))
    else:
        raise SystemExit("Pass --teams FILE or --demo")

    if not teams:
        raise SystemExit("No teams found.")

    client = ImageGenerationClient()
    try:
        await generate_league(teams, Path(args.out), client, vectorize=not args.no_svg, force=args.force)
    finally:
        await client.close()
    return 0


def main():
    ap = argparse.ArgumentParser(description="Generate palette-locked logos for every team in a league.")
    ap.add_argument("--teams", help="JSON file with the league's teams")
    ap.add_argument("--demo", action="store_true", help="Use the built-in demo league")
    ap.add_argument("--out", default=settings.EXPORT_DIR, help="Output directory")
    ap.add_argument("--no-svg", action="store_true", help="Skip the SVG trace")
    ap.add_argument("--force", action="store_true", help="Overwrite existing logos")
    args = ap.parse_args()
    raise SystemExit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()
