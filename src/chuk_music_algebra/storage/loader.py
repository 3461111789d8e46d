"""
YAML storage for algebra settings and Galois moduli.

Settings live in a single algebra.yaml. Moduli are kept one file per name
in a moduli directory, since finding a good modulus (an irreducible search
or modulus_for) can be slow and is worth doing only once.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_music_algebra.models.settings import AlgebraSettings, GaloisSettings

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "algebra.yaml"


class SettingsStore:
    """
    Reads and writes algebra.yaml.

    A missing file means default settings; a malformed file is an error.
    """

    def __init__(self, path: Path | None = None):
        """
        Args:
            path: Settings file (default ./algebra.yaml)
        """
        self.path = Path(path) if path is not None else Path.cwd() / SETTINGS_FILENAME
        self._cache: AlgebraSettings | None = None

    def load(self) -> AlgebraSettings:
        """
        Load settings, cached after the first read.

        Raises:
            ValueError: If the file is not valid YAML or fails validation
        """
        if self._cache is not None:
            return self._cache

        if not self.path.exists():
            logger.debug(f"No settings at {self.path}, using defaults")
            self._cache = AlgebraSettings()
            return self._cache

        with open(self.path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.path}: {e}") from e

        self._cache = AlgebraSettings.from_yaml_dict(data)
        logger.info(f"Loaded algebra settings from {self.path}")
        return self._cache

    def save(self, settings: AlgebraSettings) -> Path:
        """Write settings, replacing the file and the cache."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump(settings.to_yaml_dict(), f, sort_keys=False)
        self._cache = settings
        return self.path

    def clear_cache(self) -> None:
        self._cache = None


class ModulusStore:
    """
    Named Galois moduli, one YAML file each.

    A file holds the generator bits and the modulus coefficients:

        name: c-major-pair
        generator: 11
        modulus:
          0: 1
          3: 2050
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._cache: dict[str, GaloisSettings] = {}

    def _path(self, name: str) -> Path:
        return self.directory / f"{name}.yaml"

    def list_names(self) -> list[str]:
        """Names of all stored moduli, sorted."""
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob("*.yaml"))

    def get(self, name: str) -> GaloisSettings | None:
        """
        Load a stored modulus by name.

        Returns:
            GaloisSettings if found and valid, None otherwise
        """
        if name in self._cache:
            return self._cache[name]

        path = self._path(name)
        if not path.exists():
            return None

        settings = self._load_file(path)
        if settings is not None:
            self._cache[name] = settings
        return settings

    def save(self, name: str, settings: GaloisSettings, overwrite: bool = False) -> Path:
        """
        Store a generator/modulus pair under a name.

        Raises:
            ValueError: If the settings carry no modulus, or the name is
                taken and overwrite is False
        """
        if settings.modulus is None:
            raise ValueError(f"Nothing to store for '{name}': settings have no modulus")

        path = self._path(name)
        if path.exists() and not overwrite:
            raise ValueError(f"Modulus already exists: {name}")

        self.directory.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {"name": name, **settings.model_dump(mode="python")}
        with open(path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False)

        self._cache[name] = settings
        logger.info(f"Saved modulus '{name}' of degree {max(settings.modulus, default=-1)}")
        return path

    def delete(self, name: str) -> bool:
        """Remove a stored modulus; False if it did not exist."""
        self._cache.pop(name, None)
        path = self._path(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def _load_file(self, path: Path) -> GaloisSettings | None:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning(f"Could not load modulus from {path}: expected a mapping")
                return None
            data.pop("name", None)
            return GaloisSettings.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Could not load modulus from {path}: {e}")
            return None

    def clear_cache(self) -> None:
        self._cache.clear()
