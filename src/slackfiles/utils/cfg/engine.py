"""
Configuration engine: load dataclass defaults first, then merge INI overrides.
When the INI file does not exist yet, a template mirroring the dataclass
defaults is written there so the user has something to tweak.
"""

from pathlib import Path
from typing import Optional
from dataclasses import asdict
from configparser import ConfigParser

from slackfiles.utils.cfg.schema import Config


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


# Helpers
def _cast(template_value, raw: str):
    """Cast the raw INI string back to the dataclass field type."""
    t = type(template_value)
    if t is bool:
        value = raw.strip().lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    return Path(raw) if t is Path else t(raw)

def _create_config(cfg: Config, path: Path) -> None:
    """Write a template INI that mirrors the dataclass defaults."""
    cp = ConfigParser()
    for section, mapping in asdict(cfg).items():
        cp[section] = {k: str(v) for k, v in mapping.items()}
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        cp.write(f)


# Public API
def load(path: Optional[Path] = None) -> Config:
    """Load configuration from INI file and return Config object.

    Without a path the dataclass defaults are returned untouched.
    """
    cfg = Config()
    if path is None:
        return cfg

    ini = Path(path)
    if not ini.exists():
        _create_config(cfg, ini)

    cp = ConfigParser()
    cp.read(ini, encoding="utf-8")

    for sect in cp.sections():
        if not hasattr(cfg, sect):
            continue
        dst = getattr(cfg, sect)
        for key, raw in cp.items(sect):
            if hasattr(dst, key):
                setattr(dst, key, _cast(getattr(dst, key), raw))
    return cfg
