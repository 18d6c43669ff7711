"""Workspace schema metadata loaded from config/workspace.yml."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


class SchemaError(RuntimeError):
    """Raised when the schema config file is missing or invalid."""


PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_SCHEMA_PATH = PROJECT_ROOT.parent / "config" / "workspace.yml"

REQUIRED_PROPERTIES = (
    "name",
    "status",
    "category",
    "priority",
    "alignment",
    "do_date",
    "due_date",
    "project",
)


@dataclass(slots=True)
class ActionBaseSchema:
    database_name: str
    properties: Dict[str, str]
    status_values: List[str] = field(default_factory=list)
    priority_values: List[str] = field(default_factory=list)

    def label(self, field_name: str) -> str:
        """Return the Notion property label for a logical field name."""
        try:
            return self.properties[field_name]
        except KeyError as exc:
            raise SchemaError(f"Field '{field_name}' missing from schema config.") from exc


@dataclass(slots=True)
class NotesSchema:
    sheet_title: str
    headers: List[str]


@dataclass(slots=True)
class WorkspaceSchema:
    action_base: ActionBaseSchema
    notes: NotesSchema


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise SchemaError(f"Schema file not found at {path}")

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, dict):
        raise SchemaError(f"Schema file {path} must contain a mapping.")
    return data


def load_workspace_schema(path: Optional[Path] = None) -> WorkspaceSchema:
    """Load the workspace schema from YAML."""
    path = path or DEFAULT_SCHEMA_PATH
    data = _load_yaml(path)

    action_cfg = data.get("action_base") or {}
    properties = {
        str(key): str(value)
        for key, value in (action_cfg.get("properties") or {}).items()
    }
    missing = [name for name in REQUIRED_PROPERTIES if not properties.get(name)]
    if missing:
        raise SchemaError(
            f"Action Base properties missing from {path.name}: {', '.join(missing)}"
        )

    database_name = str(action_cfg.get("database_name", "")).strip()
    if not database_name:
        raise SchemaError("action_base.database_name missing from schema config.")

    notes_cfg = data.get("notes") or {}
    headers = [str(h) for h in (notes_cfg.get("headers") or [])]
    if len(headers) != 4:
        raise SchemaError("notes.headers must list exactly four column names.")

    return WorkspaceSchema(
        action_base=ActionBaseSchema(
            database_name=database_name,
            properties=properties,
            status_values=list(action_cfg.get("status_values") or []),
            priority_values=list(
                (action_cfg.get("priority_values") or {}).get("ordered", [])
            ),
        ),
        notes=NotesSchema(
            sheet_title=str(notes_cfg.get("sheet_title") or "Sheet1"),
            headers=headers,
        ),
    )
