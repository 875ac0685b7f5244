from taskstore import Task, TaskStore

from perch import Action, NotFound


class ShowTask(Action):
    @staticmethod
    def routes(router):
        router.get("/tasks/{task_id:int}", ShowTask, name="tasks.show")

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def handle(self, task_id: int) -> Task:
        task = self.store.get(task_id)
        if task is None:
            raise NotFound(f"No task {task_id}")
        return task
