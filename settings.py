"""
Key-value persistence of the last-used calculator inputs.

Values are kept as decimal text under flat keys (``equitySwap``,
``hourlyRate``, ...), so a file written by one session can be read back
by the next. The engine never touches a store; the CLI and web layers
read inputs at startup and write them back on every change.
"""

from __future__ import annotations

import json
import logging
import math
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import config as cfg
from projection import CompensationInputs, InvalidInput

logger = logging.getLogger(__name__)


def format_value(value: float) -> str:
    """Render a number as stored text: ``20`` rather than ``20.0``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_value(text: Optional[str]) -> Optional[float]:
    """Parse stored text; None when absent, unparseable or non-finite."""
    if text is None:
        return None
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


# ─── Store interface ─────────────────────────────────────────────────

class SettingsStore(ABC):
    """Flat key → decimal-text store.

    ``get`` uses presence and parse success, not truthiness: a stored
    ``"0"`` comes back as ``0.0`` instead of being replaced by the default.
    """

    @abstractmethod
    def _read(self, key: str) -> Optional[str]:
        """Return the raw stored text for *key*, or None."""

    @abstractmethod
    def _write(self, key: str, text: str) -> None:
        """Store *text* under *key*."""

    def get(self, key: str, default: float) -> float:
        raw = self._read(key)
        if raw is None:
            return default
        value = parse_value(raw)
        if value is None:
            logger.warning("Ignoring stored %s=%r; using default %s", key, raw, default)
            return default
        return value

    def set(self, key: str, value: float) -> None:
        self._write(key, format_value(value))


class InMemorySettingsStore(SettingsStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def _write(self, key: str, text: str) -> None:
        self.data[key] = text


class JsonFileSettingsStore(SettingsStore):
    """Store backed by a flat JSON object on disk.

    The file is read on first access. A missing file is an empty store;
    an unreadable one is logged and treated as empty. Every ``set``
    rewrites the whole file.
    """

    def __init__(self, path: str = cfg.SETTINGS_PATH) -> None:
        self.path = path
        self._data: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._data is not None:
            return self._data
        data: Dict[str, str] = {}
        if os.path.exists(self.path):
            try:
                with open(self.path, encoding="utf-8") as fh:
                    loaded = json.load(fh)
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Could not read settings from %s: %s", self.path, exc)
            else:
                if isinstance(loaded, dict):
                    data = {str(k): str(v) for k, v in loaded.items()}
                else:
                    logger.warning("Settings file %s is not a JSON object; ignoring it", self.path)
        self._data = data
        return data

    def _read(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def _write(self, key: str, text: str) -> None:
        data = self._load()
        data[key] = text
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)
        logger.debug("Saved %s=%s to %s", key, text, self.path)


# ─── Inputs <-> store ────────────────────────────────────────────────

def settings_for(dividend_mode: str) -> List[Tuple[str, str, float]]:
    """(store key, input field, default) triples persisted in *dividend_mode*."""
    if dividend_mode not in cfg.MODE_SETTINGS:
        raise ValueError(f"Unknown dividend mode: {dividend_mode!r}")
    return cfg.COMMON_SETTINGS + cfg.MODE_SETTINGS[dividend_mode]


def settings_keys(dividend_mode: str) -> List[str]:
    return [key for key, _, _ in settings_for(dividend_mode)]


def load_inputs(
    store: SettingsStore,
    dividend_mode: str = cfg.DEFAULT_DIVIDEND_MODE,
) -> CompensationInputs:
    """Build inputs from the store, falling back to defaults per key.

    Stored values that parse but cannot be calculated with (a zero share
    value) discard the whole stored set in favour of the defaults.
    """
    settings = settings_for(dividend_mode)
    values = {name: store.get(key, default) for key, name, default in settings}
    try:
        return CompensationInputs(dividend_mode=dividend_mode, **values)
    except InvalidInput as exc:
        logger.warning("Stored inputs rejected (%s); using defaults", exc)
        defaults = {name: default for _, name, default in settings}
        return CompensationInputs(dividend_mode=dividend_mode, **defaults)


def save_inputs(store: SettingsStore, inputs: CompensationInputs) -> None:
    """Write every key used by the inputs' dividend mode."""
    for key, name, _ in settings_for(inputs.dividend_mode):
        store.set(key, getattr(inputs, name))
