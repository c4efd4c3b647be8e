import os
import sys
from typing import Dict, List, Optional, Tuple

import pytest
from dotenv import load_dotenv

# Ensure project root is importable
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Load .env, then force a throwaway SQLite database and default reminder settings
load_dotenv()
TEST_DB_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "test_reminders.db"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["REMINDER_RESCHEDULE_ON_EDIT"] = "false"
os.environ["NOTIFICATION_PERMISSION"] = "granted"
os.environ.pop("NOTIFICATION_PUSH_URL", None)
os.environ.pop("SCHEDULER_JOBSTORE_URL", None)

from reminder_app.errors import PersistenceFailure, SchedulerFailure  # noqa: E402
from reminder_app.features.reminders.manager import ReminderManager  # noqa: E402
from reminder_app.features.reminders.store import ReminderStore  # noqa: E402


class MemoryKeyValueStore:
    """Dict-backed key-value store that can be told to fail."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceFailure("read failed")
        return self.data.get(key)

    async def set(self, key: str, blob: str) -> None:
        if self.fail_writes:
            raise PersistenceFailure("write failed")
        self.data[key] = blob
        self.writes += 1


class FakeScheduler:
    """Records schedule/cancel calls instead of talking to a real scheduler."""

    def __init__(self):
        self.scheduled: List[Tuple[str, object, object]] = []
        self.cancelled: List[str] = []
        self.live = set()
        self.fail_schedule = False
        self.fail_cancel = False
        self._counter = 0

    async def schedule(self, content, trigger) -> str:
        if self.fail_schedule:
            raise SchedulerFailure("scheduler unavailable")
        self._counter += 1
        handle = f"job-{self._counter}"
        self.scheduled.append((handle, content, trigger))
        self.live.add(handle)
        return handle

    async def cancel(self, handle: str) -> None:
        if self.fail_cancel:
            raise SchedulerFailure("cancel failed")
        self.cancelled.append(handle)
        self.live.discard(handle)

    async def is_scheduled(self, handle: str) -> bool:
        return handle in self.live


@pytest.fixture(scope="session", autouse=True)
def _clean_test_db():
    # Fresh SQLite file for each test session
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
    yield
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture()
def kv():
    return MemoryKeyValueStore()


@pytest.fixture()
def scheduler():
    return FakeScheduler()


@pytest.fixture()
def store(kv):
    return ReminderStore(kv)


@pytest.fixture()
def manager(store, scheduler):
    return ReminderManager(store, scheduler)
