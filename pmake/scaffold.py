"""
Project generation: copy a template (plus feature overlays) into a new
project folder, preprocess every text file and substitute wildcards.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional

import pathspec

from .catalog import ProjectSettings, TemplateCatalog
from .errors import PmakeUserError
from .preprocessor import InterpreterContext, build_exclude_spec, env_key, process_all
from .preprocessor.driver import iter_template_files, read_template, write_template

logger = logging.getLogger(__name__)


class ScaffoldError(PmakeUserError):
    """Destination cannot be created or populated."""
    pass


def build_context(settings: ProjectSettings) -> InterpreterContext:
    """
    Variables visible to templates:

        ENV:NAME, ENV:LANGUAGE, ENV:STANDARD, ENV:KIND, ENV:MODE   scalars
        ENV:FEATURES                                              list
    """
    return InterpreterContext({
        env_key("name"): settings.name,
        env_key("language"): settings.language,
        env_key("standard"): settings.standard,
        env_key("kind"): settings.kind,
        env_key("mode"): settings.mode,
        env_key("features"): list(settings.features),
    })


def wildcard_replacements(settings: ProjectSettings, wildcards: Dict[str, str]) -> Dict[str, str]:
    """Map wildcard markers to their values, e.g. ``{"!PROJECT!": "demo"}``."""
    values = {
        "project_name": settings.name,
        "project_language": settings.language,
        "project_standard": settings.standard,
    }
    out: Dict[str, str] = {}
    for role, marker in wildcards.items():
        if role not in values:
            logger.warning("Ignoring unknown wildcard role '%s'", role)
            continue
        if marker:
            out[marker] = values[role]
    return out


def replace_in_text(text: str, replacements: Dict[str, str]) -> str:
    for marker, value in replacements.items():
        text = text.replace(marker, value)
    return text


def copy_template(src: Path, dst: Path, replacements: Dict[str, str]) -> None:
    """
    Recursively copy ``src`` into ``dst``, substituting wildcards in every
    file and directory name. Existing files are overwritten, so feature
    overlays copied later take precedence over the base template.
    """
    for entry in sorted(src.iterdir(), key=lambda p: p.name):
        target = dst / replace_in_text(entry.name, replacements)
        if entry.is_dir():
            target.mkdir(exist_ok=True)
            copy_template(entry, target, replacements)
        else:
            shutil.copy2(entry, target)


def replace_wildcards(
    root: Path,
    replacements: Dict[str, str],
    *,
    exclude: Optional[pathspec.PathSpec] = None,
) -> List[Path]:
    """Substitute wildcards in file contents; returns the files that changed."""
    changed: List[Path] = []
    for path in iter_template_files(root, exclude=exclude):
        text = read_template(path)
        new_text = replace_in_text(text, replacements)
        if new_text != text:
            write_template(path, new_text)
            changed.append(path)
    return changed


def create_project(
    settings: ProjectSettings,
    catalog: TemplateCatalog,
    output_dir: Path,
    *,
    force: bool = False,
) -> Path:
    """
    Generate ``<output_dir>/<settings.name>``.

    Steps: copy common files, copy template, copy feature overlays,
    preprocess, replace wildcards. A preprocessing failure leaves the
    destination partially generated.

    Raises:
        ScaffoldError: destination is a file, exists and is not empty (without ``force``), or IO failure
        CatalogError, PreprocessorError: from the catalog and the preprocessor
    """
    destination = Path(output_dir) / settings.name
    if destination.exists() and not destination.is_dir():
        raise ScaffoldError(f"Destination {destination} exists and is not a directory.")
    if destination.exists() and any(destination.iterdir()) and not force:
        raise ScaffoldError(f"Destination {destination} already exists and is not empty.")

    template = catalog.template_path(settings)
    common = catalog.common_path()
    replacements = wildcard_replacements(settings, catalog.wildcards())
    exclude = build_exclude_spec(catalog.binary_patterns())

    try:
        destination.mkdir(parents=True, exist_ok=True)
        if common is not None:
            logger.debug("Copying common files %s -> %s", common, destination)
            copy_template(common, destination, replacements)
        logger.debug("Copying %s -> %s", template, destination)
        copy_template(template, destination, replacements)
        for feature in settings.features:
            logger.debug("Applying feature overlay '%s'", feature)
            copy_template(catalog.feature_path(feature), destination, replacements)
    except OSError as e:
        raise ScaffoldError(f"Couldn't populate {destination}: {e}") from e

    process_all(destination, build_context(settings), exclude=exclude)
    replace_wildcards(destination, replacements, exclude=exclude)

    logger.info("Generated %s", destination)
    return destination


__all__ = [
    "ScaffoldError",
    "build_context",
    "wildcard_replacements",
    "replace_in_text",
    "copy_template",
    "replace_wildcards",
    "create_project",
]
