"""
Template catalog.

Looks up which languages, standards, project kinds/modes and features
the templates folder provides, and turns user selections into validated
``ProjectSettings``.

Layout:

    <root>/pmake-info.yaml                  wildcards, binary patterns
    <root>/common/...                       files copied into every project
    <root>/<language>/pmake-info.yaml       standards (newest first), default modes, required features
    <root>/<language>/<kind>/<mode>/...     template files
    <root>/features/<feature>/...           feature overlays
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .config import COMMON_DIR, FEATURES_DIR, INFO_FILE
from .errors import PmakeUserError

_yaml = YAML(typ="safe")

LATEST_STANDARD = "latest"

# Roles of filename/content wildcards and their markers when the catalog sets none
DEFAULT_WILDCARDS: Dict[str, str] = {
    "project_name": "!PROJECT!",
    "project_language": "!LANGUAGE!",
    "project_standard": "!STANDARD!",
}


class CatalogError(PmakeUserError):
    """Requested setting is not present in the templates folder."""
    pass


@dataclass(frozen=True)
class ProjectSettings:
    """Validated selection for one generation run."""
    name: str
    language: str
    standard: str
    kind: str
    mode: str
    features: Tuple[str, ...] = ()


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise CatalogError(f"Couldn't parse {path}: {e}") from e
    if not isinstance(raw, dict):
        raise CatalogError(f"YAML must be a mapping: {path}")
    return raw


def _visible_dirs(path: Path) -> List[str]:
    if not path.is_dir():
        return []
    return sorted(
        entry.name for entry in path.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


def _choices(items: Iterable[str]) -> str:
    return ",".join(items)


class TemplateCatalog:
    """
    Read-only view of a templates folder.

    Usage:
        catalog = TemplateCatalog(templates_root())
        settings = catalog.resolve("demo", language="c++", kind="library")
        catalog.template_path(settings)
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        if not self.root.is_dir():
            raise CatalogError(
                f"Couldn't find templates folder {self.root}. Did you install the program properly?"
            )
        self._info = _read_yaml_map(self.root / INFO_FILE)
        self._language_info: Dict[str, dict] = {}

    # ---- languages ----

    def languages(self) -> List[str]:
        return [name for name in _visible_dirs(self.root) if name not in (FEATURES_DIR, COMMON_DIR)]

    def resolve_language(self, language: str) -> str:
        if language not in self.languages():
            raise CatalogError(
                f'The language "{language}" doesn\'t have a template setup for it. '
                f"Available languages: [{_choices(self.languages())}]"
            )
        return language

    def language_info(self, language: str) -> dict:
        if language not in self._language_info:
            self._language_info[language] = _read_yaml_map(self.root / language / INFO_FILE)
        return self._language_info[language]

    # ---- standards ----

    def standards(self, language: str) -> List[str]:
        raw = self.language_info(language).get("standards") or []
        return [str(s) for s in raw]

    def resolve_standard(self, language: str, standard: str) -> str:
        """``latest`` resolves to the first (newest) listed standard."""
        available = self.standards(language)
        if not available:
            raise CatalogError(f'The language "{language}" doesn\'t have standards available.')
        if standard == LATEST_STANDARD:
            return available[0]
        if standard not in available:
            raise CatalogError(
                f'The standard "{standard}" for the language "{language}" isn\'t available. '
                f"Available standards: [{_choices(available)}]"
            )
        return standard

    # ---- kinds and modes ----

    def kinds(self, language: str) -> List[str]:
        return _visible_dirs(self.root / language)

    def modes(self, language: str, kind: str) -> List[str]:
        return _visible_dirs(self.root / language / kind)

    def default_mode(self, language: str, kind: str) -> Optional[str]:
        configured: Dict[str, Any] = self.language_info(language).get("modes") or {}
        if kind in configured:
            return str(configured[kind])
        modes = self.modes(language, kind)
        return modes[0] if modes else None

    def resolve_kind(self, language: str, kind: str, mode: Optional[str] = None) -> Tuple[str, str]:
        if kind not in self.kinds(language):
            raise CatalogError(
                f'The kind "{kind}" for the language "{language}" doesn\'t have a template setup for it. '
                f"Available kinds: [{_choices(self.kinds(language))}]"
            )
        selected = mode or self.default_mode(language, kind)
        if selected is None or selected not in self.modes(language, kind):
            raise CatalogError(
                f'The mode "{selected}" for the kind "{kind}" isn\'t available. '
                f"Available modes: [{_choices(self.modes(language, kind))}]"
            )
        return kind, selected

    # ---- features ----

    def features(self) -> List[str]:
        return _visible_dirs(self.root / FEATURES_DIR)

    def resolve_features(self, features: Iterable[str]) -> Tuple[str, ...]:
        available = self.features()
        out: List[str] = []
        for feature in features:
            if feature not in available:
                raise CatalogError(
                    f'The feature "{feature}" doesn\'t exist. Available features: [{_choices(available)}]'
                )
            if feature not in out:
                out.append(feature)
        return tuple(out)

    def required_features(self, language: str, kind: str, mode: str) -> Tuple[str, ...]:
        """
        Features a mode gets when none are requested, from the language info:

            required_features:
              executable:
                gui: [imgui]
        """
        configured = self.language_info(language).get("required_features") or {}
        if not isinstance(configured, dict):
            raise CatalogError(f"'required_features' must be a mapping in {self.root / language / INFO_FILE}")
        per_kind = configured.get(kind) or {}
        if not isinstance(per_kind, dict):
            raise CatalogError(f"'required_features.{kind}' must be a mapping of modes")
        return tuple(str(f) for f in (per_kind.get(mode) or []))

    def feature_path(self, feature: str) -> Path:
        return self.root / FEATURES_DIR / feature

    def common_path(self) -> Optional[Path]:
        """Folder copied into every project before the template, if the catalog has one."""
        path = self.root / COMMON_DIR
        return path if path.is_dir() else None

    # ---- paths and wildcards ----

    def template_path(self, settings: ProjectSettings) -> Path:
        path = self.root / settings.language / settings.kind / settings.mode
        if not path.is_dir():
            raise CatalogError(f'The project template "{path}" doesn\'t exist.')
        return path

    def wildcards(self) -> Dict[str, str]:
        """Role -> marker, e.g. ``{"project_name": "!PROJECT!"}``."""
        out = dict(DEFAULT_WILDCARDS)
        configured = self._info.get("wildcards") or {}
        if not isinstance(configured, dict):
            raise CatalogError(f"'wildcards' must be a mapping in {self.root / INFO_FILE}")
        out.update({str(k): str(v) for k, v in configured.items()})
        return out

    def binary_patterns(self) -> List[str]:
        """Gitignore-style patterns of files that are copied but never preprocessed."""
        return [str(p) for p in (self._info.get("binary") or [])]

    def resolve(
        self,
        name: str,
        *,
        language: str,
        kind: str,
        standard: str = LATEST_STANDARD,
        mode: Optional[str] = None,
        features: Optional[Iterable[str]] = None,
    ) -> ProjectSettings:
        """``features=None`` selects the mode's required features."""
        language = self.resolve_language(language)
        kind, mode = self.resolve_kind(language, kind, mode)
        if features is None:
            features = self.required_features(language, kind, mode)
        return ProjectSettings(
            name=name,
            language=language,
            standard=self.resolve_standard(language, standard),
            kind=kind,
            mode=mode,
            features=self.resolve_features(features),
        )


__all__ = [
    "CatalogError",
    "ProjectSettings",
    "TemplateCatalog",
    "LATEST_STANDARD",
    "DEFAULT_WILDCARDS",
]
