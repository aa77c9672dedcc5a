# pathpaint/config.py
#!/usr/bin/env python3
"""
Settings for the editor, resolved in three layers:
dataclass defaults -> PATHPAINT_* environment variables -> --key=value flags.

    PATHPAINT_ROWS / --rows=12
    PATHPAINT_COLS / --cols=20
    PATHPAINT_SEARCH_DELAY_MS / --search-delay-ms=30
    PATHPAINT_REVEAL_DELAY_MS / --reveal-delay-ms=50
    PATHPAINT_SLOT / --slot=~/.pathpaint/grid.json
    PATHPAINT_LOG_LEVEL / --log-level=DEBUG
"""

import logging
import os
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

log = logging.getLogger(__name__)

ENV_PREFIX = "PATHPAINT_"
LOG_FORMAT = "[%(levelname)s] %(message)s"


@dataclass
class Settings:
    rows: int = 10
    cols: int = 10

    # inter-step delays; pacing only, never changes the result
    search_delay_ms: int = 30
    reveal_delay_ms: int = 50

    slot_path: Path = Path("~/.pathpaint/grid.json")
    log_level: str = "INFO"

    @classmethod
    def resolve(cls, argv: Optional[Sequence[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        argv = sys.argv[1:] if argv is None else argv

        raw: Dict[str, str] = {}
        for f in fields(cls):
            key = ENV_PREFIX + ("SLOT" if f.name == "slot_path" else f.name.upper())
            if key in environ:
                raw[f.name] = environ[key]
        for arg in argv:
            if not arg.startswith("--") or "=" not in arg:
                continue
            key, value = arg[2:].split("=", 1)
            name = key.replace("-", "_").lower()
            if name == "slot":
                name = "slot_path"
            raw[name] = value
        return cls().updated(raw)

    def updated(self, raw: Mapping[str, str]) -> "Settings":
        """Return a copy with string overrides applied; bad numbers keep the default."""
        changes = {}
        for f in fields(self):
            if f.name not in raw:
                continue
            value = raw[f.name]
            current = getattr(self, f.name)
            if isinstance(current, int):
                try:
                    n = int(str(value).strip())
                except ValueError:
                    log.warning("ignoring %s=%r: not an integer", f.name, value)
                    continue
                if n < 0:
                    log.warning("ignoring %s=%r: must not be negative", f.name, value)
                    continue
                changes[f.name] = n
            elif isinstance(current, Path):
                changes[f.name] = Path(value)
            else:
                changes[f.name] = str(value)
        return replace(self, **changes)

    @property
    def slot(self) -> Path:
        return self.slot_path.expanduser()


def configure_logging(level: str = "INFO") -> None:
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
