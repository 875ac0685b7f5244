from taskstore import Task, TaskStore

from perch import Action, NotFound, Request


class CompleteTask(Action):
    """Mark a task done. API clients only; viewers may not change tasks."""

    @staticmethod
    def routes(router):
        router.post("/tasks/{task_id:int}/complete", CompleteTask, name="tasks.complete")

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def controller_middleware(self) -> list[str]:
        return ["api_key"]

    def authorize(self, request: Request) -> bool:
        return request.headers.get("x-role", "editor") != "viewer"

    def handle(self, task_id: int) -> Task:
        task = self.store.complete(task_id)
        if task is None:
            raise NotFound(f"No task {task_id}")
        return task
