"""Named workout presets stored locally."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

from repcounter.workout.model import ConfigSnapshot

if TYPE_CHECKING:
    from repcounter.core.engine import RepCounterEngine


STORAGE_KEY = "workout_presets_v1"


class PresetError(ValueError):
    """Raised when a preset operation cannot be completed."""


def _default_presets_path() -> Path:
    return Path.home() / ".repcounter" / "presets.json"


def now_utc_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class WorkoutPreset:
    id: str
    name: str
    sets: int
    reps_per_set: int
    concentric_duration: float
    eccentric_duration: float
    concentric_beats: int
    eccentric_beats: int
    show_concentric_beat_numbers: bool = True
    show_eccentric_beat_numbers: bool = True
    created_at: str = ""

    @classmethod
    def from_snapshot(cls, name: str, snapshot: ConfigSnapshot) -> WorkoutPreset:
        clean = name.strip()
        if not clean:
            raise PresetError("Preset name must not be empty")
        return cls(id=uuid4().hex, name=clean, created_at=now_utc_iso(), **asdict(snapshot))

    def to_snapshot(self) -> ConfigSnapshot:
        return ConfigSnapshot(**{f.name: getattr(self, f.name) for f in fields(ConfigSnapshot)})

    def renamed(self, name: str) -> WorkoutPreset:
        clean = name.strip()
        if not clean:
            raise PresetError("Preset name must not be empty")
        return replace(self, name=clean)

    @property
    def summary(self) -> str:
        return (
            f"{self.sets}x{self.reps_per_set} "
            f"{self.concentric_duration:g}s/{self.eccentric_duration:g}s "
            f"beats {self.concentric_beats}/{self.eccentric_beats}"
        )


def _builtin(
    name: str,
    sets: int,
    reps: int,
    conc: float,
    ecc: float,
    conc_beats: int,
    ecc_beats: int,
) -> WorkoutPreset:
    return WorkoutPreset(
        id=uuid4().hex,
        name=name,
        sets=sets,
        reps_per_set=reps,
        concentric_duration=conc,
        eccentric_duration=ecc,
        concentric_beats=conc_beats,
        eccentric_beats=ecc_beats,
        created_at=now_utc_iso(),
    )


def default_presets() -> list[WorkoutPreset]:
    return [
        _builtin("Tempo 3-2 (Standard)", 3, 12, 3.0, 2.0, 3, 2),
        _builtin("Speed 1-1 (HIIT)", 4, 15, 1.0, 1.0, 1, 1),
        _builtin("Slow 3-3 (TUT)", 4, 10, 3.0, 3.0, 3, 3),
    ]


def _preset_from_payload(raw: object) -> WorkoutPreset:
    if not isinstance(raw, dict):
        raise PresetError("Preset entry must be an object")
    try:
        return WorkoutPreset(
            id=str(raw["id"]),
            name=str(raw["name"]),
            sets=int(raw["sets"]),
            reps_per_set=int(raw["reps_per_set"]),
            concentric_duration=float(raw["concentric_duration"]),
            eccentric_duration=float(raw["eccentric_duration"]),
            concentric_beats=int(raw["concentric_beats"]),
            eccentric_beats=int(raw["eccentric_beats"]),
            show_concentric_beat_numbers=bool(raw.get("show_concentric_beat_numbers", True)),
            show_eccentric_beat_numbers=bool(raw.get("show_eccentric_beat_numbers", True)),
            created_at=str(raw.get("created_at", "")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise PresetError(f"Invalid preset entry: {exc}") from exc


class PresetStore:
    """Keyed save/load of configuration snapshots in a JSON file.

    The store seeds the built-in presets when the file is missing or empty,
    and falls back to them (rewriting the file) when it cannot be decoded.
    """

    def __init__(self, path: Path | None = None, debug: bool = False) -> None:
        self.path = path or _default_presets_path()
        self._debug = debug
        self._presets: list[WorkoutPreset] = []
        self.selected_id: str | None = None
        self.load()
        if not self._presets:
            self._reset_to_defaults()

    @property
    def presets(self) -> tuple[WorkoutPreset, ...]:
        return tuple(self._presets)

    def load(self) -> None:
        if not self.path.exists():
            return
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise PresetError("Preset file must be an object")
            entries = payload.get(STORAGE_KEY, [])
            if not isinstance(entries, list):
                raise PresetError(f"'{STORAGE_KEY}' must be an array")
            self._presets = [_preset_from_payload(item) for item in entries]
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, PresetError) as exc:
            self._log(f"preset file unreadable ({exc}), restoring defaults")
            self._reset_to_defaults()
            return
        selected = payload.get("selected_id")
        if self.get(selected) is not None:
            self.selected_id = selected
        elif self.selected_id is None and self._presets:
            self.selected_id = self._presets[0].id

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            STORAGE_KEY: [asdict(preset) for preset in self._presets],
            "selected_id": self.selected_id,
        }
        self.path.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")

    def add(self, preset: WorkoutPreset) -> WorkoutPreset:
        if self.get(preset.id) is not None:
            raise PresetError(f"Preset id already exists: {preset.id}")
        self._presets.append(preset)
        self.selected_id = preset.id
        self.save()
        self._log(f"added '{preset.name}'")
        return preset

    def update(self, preset_id: str, updated: WorkoutPreset) -> WorkoutPreset:
        for index, preset in enumerate(self._presets):
            if preset.id == preset_id:
                # id and creation time belong to the stored entry
                kept = replace(updated, id=preset.id, created_at=preset.created_at)
                self._presets[index] = kept
                self.save()
                return kept
        raise PresetError(f"Unknown preset: {preset_id}")

    def delete(self, preset_id: str) -> None:
        remaining = [p for p in self._presets if p.id != preset_id]
        if len(remaining) == len(self._presets):
            raise PresetError(f"Unknown preset: {preset_id}")
        self._presets = remaining
        self.selected_id = self._presets[0].id if self._presets else None
        self.save()

    def get(self, preset_id: str | None) -> WorkoutPreset | None:
        if preset_id is None:
            return None
        return next((p for p in self._presets if p.id == preset_id), None)

    def find_by_name(self, name: str) -> WorkoutPreset | None:
        wanted = name.strip().lower()
        return next((p for p in self._presets if p.name.lower() == wanted), None)

    def select(self, preset_id: str) -> WorkoutPreset:
        preset = self.get(preset_id)
        if preset is None:
            raise PresetError(f"Unknown preset: {preset_id}")
        self.selected_id = preset.id
        self.save()
        return preset

    @property
    def selected(self) -> WorkoutPreset | None:
        return self.get(self.selected_id)

    def _reset_to_defaults(self) -> None:
        self._presets = default_presets()
        self.selected_id = self._presets[0].id
        self.save()

    def _log(self, message: str) -> None:
        if self._debug:
            print(f"[PRESETS] {message}")


def apply_preset(engine: RepCounterEngine, preset: WorkoutPreset) -> None:
    """Load ``preset`` into the engine and return it to the pristine state."""
    engine.apply_configuration(preset.to_snapshot())
    engine.reset()


def save_current_as(store: PresetStore, engine: RepCounterEngine, name: str) -> WorkoutPreset:
    return store.add(WorkoutPreset.from_snapshot(name, engine.export_configuration()))
