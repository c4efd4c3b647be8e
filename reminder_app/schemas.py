from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class Category(str, Enum):
    work = "Work"
    study = "Study"
    personal = "Personal"
    custom = "Custom"


class Repeat(str, Enum):
    none = "none"
    daily = "daily"
    weekly = "weekly"


# ---------------------------------------------------------------------------
# Stored record
# ---------------------------------------------------------------------------
class Reminder(BaseModel):
    """A persisted reminder.

    Serialized with the field names the mobile app used (``date``,
    ``notificationId``) so existing blobs keep loading.
    """

    id: str = Field(..., description="Opaque unique identifier")
    title: str = Field(..., description="Reminder title as entered")
    category: Category = Field(Category.personal, description="Reminder category")
    occurs_at: datetime = Field(..., alias="date", description="First (or only) occurrence")
    repeat: Repeat = Field(Repeat.none, description="Repeat cadence")
    schedule_handle: Optional[str] = Field(None, alias="notificationId", description="Scheduler handle, if scheduled")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# API Schemas
# ---------------------------------------------------------------------------
class ReminderCreate(BaseModel):
    title: str = Field(..., description="Title of the reminder")
    category: Category = Field(Category.personal, description="Reminder category")
    repeat: Repeat = Field(Repeat.none, description="none, daily or weekly")
    occurs_at: Optional[datetime] = Field(None, description="When to remind; defaults to now")


class ReminderUpdate(BaseModel):
    title: str = Field(..., description="Updated title")
    category: Category = Field(..., description="Updated category")
    repeat: Repeat = Field(..., description="Updated repeat cadence")
    occurs_at: datetime = Field(..., description="Updated occurrence time")


class ReminderOut(BaseModel):
    id: str = Field(..., description="Unique identifier for the reminder")
    title: str = Field(..., description="Reminder title")
    category: Category = Field(..., description="Reminder category")
    occurs_at: datetime = Field(..., description="First (or only) occurrence")
    repeat: Repeat = Field(..., description="Repeat cadence")
    schedule_handle: Optional[str] = Field(None, description="Scheduler handle, null if scheduling failed")

    model_config = {"from_attributes": True}


class ReminderList(BaseModel):
    count: int = Field(..., description="Total number of reminders returned")
    reminders: List[ReminderOut] = Field(..., description="Reminders, newest first")


class ReminderResponse(BaseModel):
    reminder: ReminderOut = Field(..., description="The created or updated reminder")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal scheduler problems")


class DeleteReminderResponse(BaseModel):
    id: str = Field(..., description="ID of the deleted reminder")
    deleted: bool = Field(True, description="Whether the reminder was removed")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal scheduler problems")


class PermissionOut(BaseModel):
    status: str = Field(..., description="granted or denied")
    granted: bool = Field(..., description="Whether notifications may be shown")
