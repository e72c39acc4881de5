"""
This file is used to define the schema for the config file.
"""
from pathlib import Path
from dataclasses import dataclass, field


@dataclass
class Api:
    """Slack Web API access."""
    token:      str   = ""
    base_url:   str   = "https://slack.com/api"
    page_size:  int   = 200
    # Google Docs come without a private download url, so they are left out
    types:      str   = "spaces,snippets,images,zips,pdfs"
    timeout:    float = 0.0  # seconds, 0 waits forever


@dataclass
class Archive:
    """What to archive and where to put it."""
    destination: Path = Path("downloads")
    weeks:       int  = 26
    include_ims: bool = False
    remove:      bool = False
    simulation:  bool = False
    quiet:       bool = False


@dataclass
class Config:
    """Main configuration container aggregating all sections."""
    api:     Api     = field(default_factory=Api)
    archive: Archive = field(default_factory=Archive)
