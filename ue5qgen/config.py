from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from .constants import DEFAULT_LANGUAGE, TARGET_PER_CATEGORY, TARGET_TOTAL


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    return int(val) if val else default


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "logs"
    filename: str = "app.log"

    def file_path(self) -> Path:
        return Path(self.log_dir) / self.filename


@dataclass
class QuotaConfig:
    target_total: int = field(default_factory=lambda: _env_int("UE5_TARGET_TOTAL", TARGET_TOTAL))
    target_per_category: int = field(
        default_factory=lambda: _env_int("UE5_TARGET_PER_CATEGORY", TARGET_PER_CATEGORY)
    )


@dataclass
class StorageConfig:
    prefs_path: str = field(
        default_factory=lambda: os.getenv("UE5_PREFS_PATH", ".ue5qgen/preferences.json")
    )
    questions_path: str = field(
        default_factory=lambda: os.getenv("UE5_QUESTIONS_PATH", ".ue5qgen/questions.json")
    )


@dataclass
class GenerationConfig:
    """Session-scoped generation parameters edited from the settings panel."""

    discipline: str = "Technical Art"
    difficulty: str = "Easy MC"
    type: str = "Balanced"
    language: str = DEFAULT_LANGUAGE
    batch_size: int = 6
    creator_name: str = ""


@dataclass
class AppConfig:
    logging: LoggingConfig = None  # type: ignore[assignment]
    quota: QuotaConfig = None  # type: ignore[assignment]
    storage: StorageConfig = None  # type: ignore[assignment]
    generation: GenerationConfig = None  # type: ignore[assignment]

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> "AppConfig":
        return AppConfig(
            logging=LoggingConfig(**payload.get("logging", {})),
            quota=QuotaConfig(**payload.get("quota", {})),
            storage=StorageConfig(**payload.get("storage", {})),
            generation=GenerationConfig(**payload.get("generation", {})),
        )

    @staticmethod
    def from_json(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_yaml(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f) or {}
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_file(path: str | Path) -> "AppConfig":
        if Path(path).suffix in {".yaml", ".yml"}:
            return AppConfig.from_yaml(path)
        return AppConfig.from_json(path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logging": asdict(self.logging),
            "quota": asdict(self.quota),
            "storage": asdict(self.storage),
            "generation": asdict(self.generation),
        }

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)


# Provide safe defaults via a factory function for top-level config
def default_app_config() -> AppConfig:
    return AppConfig(
        logging=LoggingConfig(),
        quota=QuotaConfig(),
        storage=StorageConfig(),
        generation=GenerationConfig(),
    )
