"""
Storage - settings and moduli on disk.

- SettingsStore: algebra.yaml
- ModulusStore: named Galois moduli
"""

from chuk_music_algebra.storage.loader import SETTINGS_FILENAME, ModulusStore, SettingsStore

__all__ = ["SETTINGS_FILENAME", "ModulusStore", "SettingsStore"]
