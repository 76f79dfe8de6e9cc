"""
Config schema definition for the report publisher.

The publisher itself is driven by operator answers, but the locations it
works on (site directory, staging directory, index page, log file) and the
defaults it offers are read from a small JSON file.  Parsing that file
through these pydantic models gives every module one consistent, typed view
of the configuration: missing keys fall back to the defaults below and values
of the wrong type raise :class:`pydantic.ValidationError` early.

The config file is looked up in this order:

1. the explicit path passed to :func:`load_config` (``--config`` on the CLI);
2. ``REPORT_PUBLISHER_CONFIG`` from the environment or a ``.env`` file;
3. ``publisher.json`` in the working directory.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

CONFIG_ENV_VAR = "REPORT_PUBLISHER_CONFIG"
DEFAULT_CONFIG_FILE = "publisher.json"


class PathsConfig(BaseModel):
    """Filesystem locations, relative paths resolve against the working directory."""

    site_dir: str = Field('site', description="Root of the static site.")
    reports_dir: str = Field(
        'reports', description="Staging directory for pending reports, relative to site_dir."
    )
    index_file: str = Field(
        'research.html', description="HTML listing page that receives new cards, relative to site_dir."
    )
    log: str = Field('logs/publish_report.log', description="Path to the publisher log file.")

    def site_path(self, base: Path | None = None) -> Path:
        base = Path.cwd() if base is None else Path(base)
        return base / self.site_dir

    def staging_path(self, base: Path | None = None) -> Path:
        return self.site_path(base) / self.reports_dir

    def index_path(self, base: Path | None = None) -> Path:
        return self.site_path(base) / self.index_file


class ScanConfig(BaseModel):
    """Which staging entries count as pending reports."""

    extensions: List[str] = Field(
        default_factory=lambda: ['.html'], description="Recognized report file extensions."
    )
    exclude: List[str] = Field(
        default_factory=lambda: ['README.md'], description="Housekeeping file names that are never offered."
    )


class IndexConfig(BaseModel):
    """Index page structure."""

    container_id: str = Field(
        'researchGrid', description="id of the element holding the report cards."
    )


class PromptConfig(BaseModel):
    """Defaults offered by the interactive prompts."""

    default_read_time: str = Field('5 min read', description="Default read-time label.")


class VCSConfig(BaseModel):
    """Version control step."""

    enabled: bool = Field(True, description="Whether to commit the published changes.")
    repo_dir: str = Field('.', description="Working tree the git commands run in.")
    push: bool = Field(True, description="Whether to push when a remote is configured.")
    commit_message: str = Field(
        'Add report: {title}', description="Commit message template, {title} is the report title."
    )


class ConfigSchema(BaseModel):
    """Root configuration model encompassing all sub-configs."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    vcs: VCSConfig = Field(default_factory=VCSConfig)


def resolve_config_path(path: Optional[str] = None) -> str:
    """Return the config file to read, honouring ``.env`` and the environment."""
    if path:
        return path
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    return os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE


def load_config(path: Optional[str] = None) -> ConfigSchema:
    """
    Load configuration from a JSON file, applying defaults and validating types.

    Args:
        path: Location of the JSON configuration file.  When omitted the
            location is resolved by :func:`resolve_config_path`.  If the file
            does not exist or contains invalid JSON, an empty configuration
            is assumed.

    Returns:
        ConfigSchema: Parsed configuration model with defaults filled in.

    Raises:
        pydantic.ValidationError: If the provided configuration contains
            values of incorrect type.
    """
    cfg_path = resolve_config_path(path)
    try:
        with open(cfg_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
            if not isinstance(data, dict):
                data = {}
    except FileNotFoundError:
        data = {}
    except (OSError, ValueError):
        # unreadable or malformed JSON
        data = {}
    return ConfigSchema(**data)


# Plain dict version of the default configuration
DEFAULT_CFG: Dict = ConfigSchema().model_dump()
