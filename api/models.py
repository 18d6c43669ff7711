"""Shared Pydantic models for API routers.

Request bodies use the camelCase field names clients already send; Python
attributes stay snake_case through aliases.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from nola_buddy.notion_client import ActionFields, LocalDate


Source = Literal["auto", "live", "stub"]


# =============================================================================
# Action Base Models
# =============================================================================

class LocalDateModel(BaseModel):
    """Civil date (MM/DD/YYYY or YYYY-MM-DD) with optional 24h HH:MM."""
    date: str
    time: Optional[str] = None

    def to_local_date(self) -> LocalDate:
        return LocalDate(date=self.date, time=self.time)


class ActionFieldsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = Field(None, alias="type")
    priority_level: Optional[str] = Field(None, alias="priorityLevel")
    alignment: Optional[str] = None
    do_date: Optional[LocalDateModel] = Field(None, alias="doDate")
    due_date: Optional[LocalDateModel] = Field(None, alias="dueDate")
    project_page_id: Optional[str] = Field(None, alias="projectAttributePageId")

    def to_fields(self) -> ActionFields:
        return ActionFields(
            name=self.name,
            status=self.status,
            category=self.category,
            priority_level=self.priority_level,
            alignment=self.alignment,
            do_date=self.do_date.to_local_date() if self.do_date else None,
            due_date=self.due_date.to_local_date() if self.due_date else None,
            project_page_id=self.project_page_id,
        )


class ActionBaseCreateRequest(ActionFieldsModel):
    name: str


class ActionBaseUpdateRequest(ActionFieldsModel):
    page_id: str = Field(..., alias="pageId")


class ActionBaseQueryRequest(BaseModel):
    """Inclusive civil date range; both bounds default to today."""
    model_config = ConfigDict(populate_by_name=True)

    from_date: Optional[str] = Field(None, alias="fromDate")
    to_date: Optional[str] = Field(None, alias="toDate")


class ActionBaseFindRequest(BaseModel):
    title: str


class ActionBaseArchiveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_id: str = Field(..., alias="pageId")


class DatabaseSearchRequest(BaseModel):
    name: str


# =============================================================================
# Notes Models
# =============================================================================

class NoteCreateRequest(BaseModel):
    notes: Optional[str] = None
    title: Optional[str] = None
    tag: Optional[str] = None


class NoteListRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tag: Optional[str] = None
    from_date: Optional[str] = Field(None, alias="fromDate")
    to_date: Optional[str] = Field(None, alias="toDate")
    limit: int = Field(50, ge=0, le=1000)


class NoteRowRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    row_index: Optional[int] = Field(None, alias="rowIndex")


class NoteUpdateRequest(NoteRowRequest):
    title: Optional[str] = None
    tag: Optional[str] = None
    notes: Optional[str] = None
    delete_fields: List[str] = Field(default_factory=list, alias="deleteFields")
