from taskstore import TaskStore

from perch import Action
from perch.validation import max_length, required


class CreateTask(Action):
    @staticmethod
    def routes(router):
        router.post("/tasks", CreateTask, name="tasks.store")

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def rules(self) -> dict:
        return {"title": [required, max_length(80)]}

    def handle(self, title: str) -> tuple[dict, int]:
        task = self.store.add(title)
        return {"id": task.id, "title": task.title, "done": task.done}, 201
