"""
Side-effect capabilities (clipboard, share sheet, file saving).

The pipeline never reaches for these itself; callers inject whichever
implementations their environment provides.
"""
import re
from pathlib import Path
from typing import Optional, Protocol

from app.core.logging import logger


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None: ...


class ShareSheet(Protocol):
    async def share(self, title: str, url: str) -> None: ...


class FileSaver(Protocol):
    def save(self, filename: str, data: bytes) -> str: ...


def safe_filename(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", name.strip()) or "team"


def logo_stem(team_name: str) -> str:
    """``Blue Wolves`` -> ``Blue_Wolves_logo``"""
    return f"{safe_filename(team_name)}_logo"


def logo_filename(team_name: str, extension: str = "png") -> str:
    return f"{logo_stem(team_name)}.{extension}"


class LocalFileSaver:
    """Writes files below a base directory."""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

    def save(self, filename: str, data: bytes) -> str:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        path = self.base_dir / safe_filename(filename)
        path.write_bytes(data)
        logger.info(f"Saved {len(data)} bytes to {path}")
        return str(path)


async def share_link(
    title: str,
    url: str,
    share_sheet: Optional[ShareSheet] = None,
    clipboard: Optional[Clipboard] = None,
) -> str:
    """
    Offer a result link to the user.

    Uses the share sheet when one is available, otherwise copies the URL.
    Returns which channel was used ("share", "clipboard" or "none"); a
    failing channel is logged and reported as "none".
    """
    try:
        if share_sheet is not None:
            await share_sheet.share(title, url)
            return "share"
        if clipboard is not None:
            await clipboard.write_text(url)
            return "clipboard"
    except Exception as e:
        logger.warning(f"Could not share link for {title}: {str(e)}")
    return "none"
