from html import escape

from taskstore import Task, TaskStore

from perch import Action, Request
from perch.validation import one_of


class ListTasks(Action):
    """List tasks, optionally filtered by ``?status=open|done``."""

    @staticmethod
    def routes(router):
        router.get("/tasks", ListTasks, name="tasks.index")

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def rules(self) -> dict:
        return {"status": [one_of("all", "open", "done")]}

    def handle(self, status: str = "all") -> list[Task]:
        return self.store.all(status)

    def json_response(self, tasks: list[Task], request: Request) -> dict:
        return {"data": [{"id": t.id, "title": t.title, "done": t.done} for t in tasks]}

    def html_response(self, tasks: list[Task], request: Request) -> str:
        items = "".join(
            f'<li class="{"done" if t.done else "open"}">{escape(t.title)}</li>' for t in tasks
        )
        return f"<ul>{items}</ul>"
