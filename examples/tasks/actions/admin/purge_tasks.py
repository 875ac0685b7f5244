from taskstore import TaskStore

from perch import Action


class PurgeTasks(Action):
    """Delete every task.

    ``handle`` is the operation, usable from scripts via
    ``PurgeTasks.make(store=...).handle()``. The route calls ``purge``
    directly, behind the API key.
    """

    @staticmethod
    def routes(router):
        router.delete("/admin/tasks", (PurgeTasks, "purge"), name="admin.purge")

    controller_middleware = ("api_key",)

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def handle(self) -> int:
        return self.store.clear()

    def purge(self) -> dict:
        return {"deleted": self.handle()}
