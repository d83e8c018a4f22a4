from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ROOT_DIR = Path.cwd()
DATA_DIR = ROOT_DIR / "data"
EXPORTS_DIR = ROOT_DIR / "exports"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def clean_path(p: Optional[str]) -> str:
    """Corrige 'C\\:\\Program Files\\...' -> 'C:\\Program Files\\...' et normalise."""
    if not p:
        return ""
    p = p.strip().strip('"').strip("'")
    p = p.replace("\\:", ":")
    return os.path.normpath(p)


@dataclass
class AppConfig:
    data_dir: Path = DATA_DIR
    exports_dir: Path = EXPORTS_DIR
    calendar_path: Optional[Path] = None
    wkhtmltopdf_path: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        self.exports_dir = Path(self.exports_dir)
        if self.calendar_path is None:
            self.calendar_path = self.data_dir / "reminders.ics"
        else:
            self.calendar_path = Path(self.calendar_path)

    @classmethod
    def from_env(cls) -> "AppConfig":
        env = os.environ
        wk = None
        for env_key in ("WKHTMLTOPDF_PATH", "WKHTMLTOPDF"):
            if env.get(env_key):
                wk = clean_path(env[env_key])
                break
        cal = env.get("SHOOTBOOK_CALENDAR")
        return cls(
            data_dir=Path(env.get("SHOOTBOOK_DATA_DIR") or DATA_DIR),
            exports_dir=Path(env.get("SHOOTBOOK_EXPORTS_DIR") or EXPORTS_DIR),
            calendar_path=Path(cal) if cal else None,
            wkhtmltopdf_path=wk,
            log_level=(env.get("SHOOTBOOK_LOG_LEVEL") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
