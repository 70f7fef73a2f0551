from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .catalog import LATEST_STANDARD, ProjectSettings, TemplateCatalog
from .config import setup_logging, templates_root
from .errors import PmakeUserError
from .preprocessor import LIST_SEPARATOR, split_list
from .scaffold import create_project
from .version import tool_version

# Короткие флаги для типовых режимов, эквивалент --mode NAME
MODE_FLAGS = ("console", "static", "header-only")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pmake",
        description="Project scaffolder (template copy + preprocessing)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-n", "--name", required=True, help="name of the project")
    p.add_argument("-l", "--language", default="c++", help="language used in the project")
    p.add_argument("-k", "--kind", default="executable", help="kind of the project")
    p.add_argument(
        "-s", "--standard",
        default=LATEST_STANDARD,
        help="language standard used in the project ('latest' picks the newest)",
    )

    modes = p.add_mutually_exclusive_group()
    modes.add_argument("-m", "--mode", dest="mode", help="mode folder inside <language>/<kind>/ (default: from pmake-info.yaml)")
    for flag in MODE_FLAGS:
        modes.add_argument(f"--{flag}", dest="mode", action="store_const", const=flag)

    p.add_argument(
        "-f", "--features",
        metavar=f"NAME[{LIST_SEPARATOR}NAME...]",
        help=f"feature overlays, separated by '{LIST_SEPARATOR}'",
    )
    p.add_argument("--templates", type=Path, help="templates folder (default: $PMAKE_TEMPLATES or next to pmake)")
    p.add_argument("-o", "--output", type=Path, default=None, help="where to create the project (default: cwd)")
    p.add_argument("--force", action="store_true", help="generate into a non-empty destination")
    p.add_argument("--verbose", action="store_true", help="debug logging")
    return p


def _summary(settings: ProjectSettings, output: Path) -> str:
    lines = [
        "┌– [pmake] –––",
        f"| name.......: {settings.name}",
        f"| language...: {settings.language} ({settings.standard})",
        f"| kind.......: {settings.kind} ({settings.mode})",
    ]
    if settings.features:
        lines.append(f"| features...: {LIST_SEPARATOR.join(settings.features)}")
    lines += [
        "|",
        f"| output.....: {output}",
        "└–––––––––––––",
    ]
    return "\n".join(lines) + "\n"


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    setup_logging(ns.verbose)

    try:
        catalog = TemplateCatalog(templates_root(ns.templates))
        settings = catalog.resolve(
            ns.name,
            language=ns.language,
            kind=ns.kind,
            standard=ns.standard,
            mode=ns.mode,
            features=split_list(ns.features) if ns.features is not None else None,
        )
        output = create_project(settings, catalog, ns.output or Path.cwd(), force=ns.force)
    except PmakeUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    sys.stdout.write(_summary(settings, output))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
