"""
Serialization and export utilities.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from .exceptions import OutputError
from .models import Database, VersionStamp


logger = logging.getLogger(__name__)

PERL_PACKAGE = "CPANSA::DB"
FORMATS = ("perl", "json")


def render_json(database: Database, stamp: VersionStamp) -> str:
    payload = {"version": str(stamp), **database.to_dict()}
    return json.dumps(payload, indent=2, default=str) + "\n"


def _perl_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _perl_value(value: Any, indent: int) -> str:
    pad = "  " * (indent + 1)
    closing = "  " * indent
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{pad}{_perl_string(str(key))} => {_perl_value(value[key], indent + 1)},"
            for key in sorted(value, key=str)
        ]
        return "{\n" + "\n".join(items) + f"\n{closing}}}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{pad}{_perl_value(item, indent + 1)}," for item in value]
        return "[\n" + "\n".join(items) + f"\n{closing}]"
    if value is None:
        return "undef"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (date, datetime)):
        return _perl_string(value.isoformat())
    return _perl_string(str(value))


def render_perl_module(
    database: Database, stamp: VersionStamp, package: str = PERL_PACKAGE
) -> str:
    """Render the database as a Perl module with a ``db`` sub."""
    lines = [
        "# Generated by cpansa-db. Do not edit.",
        f"package {package};",
        "",
        "use strict;",
        "use warnings;",
        "",
        f"our $VERSION = '{stamp}';",
        "",
        "sub db {",
        "  " + _perl_value(database.to_dict(), 1) + ";",
        "}",
        "",
        "1;",
        "",
    ]
    return "\n".join(lines)


def render(database: Database, stamp: VersionStamp, output_format: str = "perl") -> str:
    if output_format == "json":
        return render_json(database, stamp)
    if output_format == "perl":
        return render_perl_module(database, stamp)
    raise ValueError(f"Unsupported output format: {output_format}")


def write_output(text: str, destination: Union[str, Path]) -> Optional[Path]:
    """Write to a file path, or to stdout when ``destination`` is ``-``."""
    if str(destination) == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
        return None
    path = Path(destination)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise OutputError(f"Cannot write database to {path}: {e}") from e
    logger.info("Database written to %s", path)
    return path


def summary_rows(database: Database) -> List[Dict[str, Any]]:
    rows = []
    for name, entry in database.dists.items():
        rows.append({
            "distribution": name,
            "advisories": len(entry.advisories),
            "releases": len(entry.versions) if entry.versions is not None else None,
            "main_module": entry.main_module,
            "darkpan": any(a.get("darkpan") for a in entry.advisories),
        })
    return rows


def export_summary_csv(database: Database, output_file: Path) -> Path:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(
        summary_rows(database),
        columns=["distribution", "advisories", "releases", "main_module", "darkpan"],
    )
    df.to_csv(output_file, index=False)
    return output_file


def export_worksheets(database: Database, output_file: Path) -> Path:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    dists_df = pd.DataFrame(
        summary_rows(database),
        columns=["distribution", "advisories", "releases", "main_module", "darkpan"],
    )
    modules_df = pd.DataFrame(
        sorted(database.module2dist.items()), columns=["module", "distribution"]
    )
    with pd.ExcelWriter(output_file, engine="openpyxl") as writer:
        dists_df.to_excel(writer, sheet_name="dists", index=False)
        modules_df.to_excel(writer, sheet_name="module2dist", index=False)
    return output_file
