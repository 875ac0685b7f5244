"""In-memory task storage shared by the example's actions.

Sync action methods run in worker threads, so every access goes through
a lock.
"""

import threading
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    done: bool = False


class TaskStore:
    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def all(self, status: str = "all") -> list[Task]:
        with self._lock:
            tasks = sorted(self._tasks.values(), key=lambda t: t.id)
        if status == "open":
            return [t for t in tasks if not t.done]
        if status == "done":
            return [t for t in tasks if t.done]
        return tasks

    def add(self, title: str) -> Task:
        with self._lock:
            task = Task(id=self._next_id, title=title)
            self._tasks[task.id] = task
            self._next_id += 1
        return task

    def get(self, task_id: int) -> Task | None:
        with self._lock:
            return self._tasks.get(task_id)

    def complete(self, task_id: int) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            task = replace(task, done=True)
            self._tasks[task_id] = task
            return task

    def clear(self) -> int:
        with self._lock:
            count = len(self._tasks)
            self._tasks.clear()
            return count
