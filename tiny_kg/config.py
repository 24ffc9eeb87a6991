"""Configuration management for Tiny-KG."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()


def _env_or_default(env_name: str, default_value: object) -> str:
    """Return environment value or fallback as string."""
    value = os.environ.get(env_name)
    if value is not None:
        return value
    return str(default_value)


@dataclass
class Config:
    """Configuration for the knowledge graph engine."""

    max_suggestions: int = 16
    data_file: str = "relations.txt"
    dot_file: str = "kg_graph.dot"
    html_file: str = "graph_viz.html"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be at least 1")

    @staticmethod
    def _resolve_yaml_path(config_path: Optional[str] = None) -> Optional[Path]:
        """Resolve config.yaml path from explicit path or default search paths."""
        if config_path:
            path = Path(config_path)
            return path if path.exists() else None

        search_paths = [
            Path.cwd() / "config.yaml",
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                return path
        return None

    @classmethod
    def from_yaml(cls, config_path: Optional[str] = None) -> "Config":
        """Load configuration from YAML file and environment variables.

        Args:
            config_path: Path to config.yaml file. If None, searches in current
                        directory and package directory.

        Returns:
            Config instance with merged settings.
        """
        # Default values
        config_data = {
            "resolution": {
                "max_suggestions": 16,
            },
            "storage": {
                "data_file": "relations.txt",
                "dot_file": "kg_graph.dot",
                "html_file": "graph_viz.html",
            },
            "logging": {
                "level": "WARNING",
            },
        }

        yaml_path = cls._resolve_yaml_path(config_path)

        # Load YAML if found
        if yaml_path and yaml_path.exists():
            with open(yaml_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
                # Deep merge
                for section in config_data:
                    if isinstance(loaded.get(section), dict):
                        config_data[section].update(loaded[section])

        # Environment variables override YAML
        resolution_config = config_data["resolution"]
        storage_config = config_data["storage"]
        logging_config = config_data["logging"]
        return cls(
            max_suggestions=int(_env_or_default("KG_MAX_SUGGESTIONS", resolution_config.get("max_suggestions", 16))),
            data_file=os.environ.get("KG_DATA_FILE") or storage_config.get("data_file", "relations.txt"),
            dot_file=os.environ.get("KG_DOT_FILE") or storage_config.get("dot_file", "kg_graph.dot"),
            html_file=os.environ.get("KG_HTML_FILE") or storage_config.get("html_file", "graph_viz.html"),
            log_level=(os.environ.get("KG_LOG_LEVEL") or logging_config.get("level", "WARNING")).upper(),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from the default config.yaml search paths and environment."""
        return cls.from_yaml()
