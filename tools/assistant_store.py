"""In-memory store of meetings, tasks, reminders and notes for the personal assistant."""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field


def _today() -> str:
    return datetime.now().date().isoformat()


def _now() -> str:
    return datetime.now().isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return list(value)


class Meeting(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str = "Meeting"
    date: str = Field(default_factory=_today)
    time: str = "09:00"
    duration: str = "60"
    attendees: List[str] = Field(default_factory=list)
    location: str = "TBD"
    description: str = ""
    created_at: str = Field(default_factory=_now)


class Task(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str = "Task"
    description: str = ""
    priority: str = "medium"
    due_date: Optional[str] = None
    status: str = "pending"
    created_at: str = Field(default_factory=_now)


class Reminder(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str = "Reminder"
    message: str = ""
    date: str = Field(default_factory=_today)
    time: str = "09:00"
    recurring: bool = False
    created_at: str = Field(default_factory=_now)


class Note(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str = "Note"
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=_now)


class UserRecords(BaseModel):
    meetings: List[Meeting] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    reminders: List[Reminder] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)


def _pick(data: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    return {key: data[key] for key in keys if data.get(key) not in (None, "")}


class AssistantMemory:
    """Per-user records, kept for the lifetime of the process."""

    def __init__(self):
        self._users: Dict[str, UserRecords] = {}

    def records(self, user_id: str) -> UserRecords:
        return self._users.setdefault(user_id, UserRecords())

    def schedule_meeting(self, user_id: str, data: Mapping[str, Any]) -> Meeting:
        fields = _pick(data, "title", "date", "time", "duration", "location", "description")
        meeting = Meeting(attendees=_as_list(data.get("attendees")), **fields)
        self.records(user_id).meetings.append(meeting)
        return meeting

    def create_task(self, user_id: str, data: Mapping[str, Any]) -> Task:
        task = Task(**_pick(data, "title", "description", "priority", "due_date"))
        self.records(user_id).tasks.append(task)
        return task

    def set_reminder(self, user_id: str, data: Mapping[str, Any]) -> Reminder:
        recurring = str(data.get("recurring", "")).lower() in ("true", "yes", "daily", "weekly")
        reminder = Reminder(recurring=recurring, **_pick(data, "title", "message", "date", "time"))
        self.records(user_id).reminders.append(reminder)
        return reminder

    def create_note(self, user_id: str, data: Mapping[str, Any]) -> Note:
        note = Note(tags=_as_list(data.get("tags")), **_pick(data, "title", "content"))
        self.records(user_id).notes.append(note)
        return note

    def calendar(self, user_id: str) -> Dict[str, List[Dict[str, Any]]]:
        records = self._users.get(user_id)
        if records is None:
            return {"meetings": [], "tasks": [], "reminders": []}
        return {
            "meetings": [meeting.model_dump() for meeting in records.meetings],
            "tasks": [task.model_dump() for task in records.tasks],
            "reminders": [reminder.model_dump() for reminder in records.reminders],
        }

    def summary(self, user_id: str) -> str:
        """One line per record type, for prompt context."""
        records = self._users.get(user_id)
        if records is None:
            return "Nothing on record yet."
        lines = []
        for meeting in records.meetings[-5:]:
            lines.append(f"Meeting: {meeting.title} on {meeting.date} at {meeting.time}")
        for task in records.tasks[-5:]:
            lines.append(f"Task: {task.title} ({task.priority}, {task.status})")
        for reminder in records.reminders[-5:]:
            lines.append(f"Reminder: {reminder.title} on {reminder.date} at {reminder.time}")
        for note in records.notes[-5:]:
            lines.append(f"Note: {note.title}")
        return "\n".join(lines) or "Nothing on record yet."

    def clear(self, user_id: Optional[str] = None):
        if user_id is None:
            self._users.clear()
        else:
            self._users.pop(user_id, None)
