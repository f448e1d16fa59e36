"""
TaskTracker HTTP API
====================

Thin request/response layer over a TaskManager.

Endpoints (same shape for /tasks, /subtasks, /epics):
- GET    /tasks            -> every task
- GET    /tasks/{id}       -> one task (recorded in the view history)
- POST   /tasks            -> create, or update when the body carries a positive id
- DELETE /tasks/{id}       -> delete
- GET    /epics/{id}/subtasks
- GET    /history
- GET    /prioritized

Usage:
    tasktracker serve --port 8080
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tasktracker import __version__
from tasktracker.core.manager import TaskManager
from tasktracker.exceptions import NotFoundError, ValidationError
from tasktracker.models import Epic, Subtask, Task, to_wire

logger = logging.getLogger(__name__)


def _manager(request: Request) -> TaskManager:
    return request.app.state.manager


def create_app(manager: TaskManager) -> FastAPI:
    """Build the API application around an existing task store."""
    app = FastAPI(
        title="TaskTracker API",
        version=__version__,
        description="Tasks, epics and subtasks with time-slot conflict checks",
    )
    app.state.manager = manager

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        logger.info("%s %s -> 404: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def conflict_handler(request: Request, exc: ValidationError) -> JSONResponse:
        # The overlap outcome is reported as 406, distinct from payload errors (422).
        logger.info("%s %s -> 406: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_406_NOT_ACCEPTABLE, content={"detail": str(exc)}
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    # ---- tasks ----

    @app.get("/tasks")
    def list_tasks(request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_all_tasks()))

    @app.get("/tasks/{task_id}")
    def get_task(task_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_task_by_id(task_id)))

    @app.post("/tasks")
    def post_task(task: Task, request: Request) -> JSONResponse:
        store = _manager(request)
        saved = store.update_task(task) if task.id > 0 else store.add_task(task)
        return JSONResponse(to_wire(saved), status_code=status.HTTP_201_CREATED)

    @app.delete("/tasks/{task_id}")
    def delete_task(task_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).delete_task_by_id(task_id)))

    # ---- subtasks ----

    @app.get("/subtasks")
    def list_subtasks(request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_all_subtasks()))

    @app.get("/subtasks/{subtask_id}")
    def get_subtask(subtask_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_subtask_by_id(subtask_id)))

    @app.post("/subtasks")
    def post_subtask(subtask: Subtask, request: Request) -> JSONResponse:
        store = _manager(request)
        if subtask.id > 0:
            saved = store.update_subtask(subtask)
        else:
            saved = store.add_subtask(subtask)
        return JSONResponse(to_wire(saved), status_code=status.HTTP_201_CREATED)

    @app.delete("/subtasks/{subtask_id}")
    def delete_subtask(subtask_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).delete_subtask_by_id(subtask_id)))

    # ---- epics ----

    @app.get("/epics")
    def list_epics(request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_all_epics()))

    @app.get("/epics/{epic_id}")
    def get_epic(epic_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_epic_by_id(epic_id)))

    @app.get("/epics/{epic_id}/subtasks")
    def get_epic_subtasks(epic_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_epic_subtasks(epic_id)))

    @app.post("/epics")
    def post_epic(epic: Epic, request: Request) -> JSONResponse:
        store = _manager(request)
        saved = store.update_epic(epic) if epic.id > 0 else store.add_epic(epic)
        return JSONResponse(to_wire(saved), status_code=status.HTTP_201_CREATED)

    @app.delete("/epics/{epic_id}")
    def delete_epic(epic_id: int, request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).delete_epic_by_id(epic_id)))

    # ---- views ----

    @app.get("/history")
    def get_history(request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_history()))

    @app.get("/prioritized")
    def get_prioritized(request: Request) -> JSONResponse:
        return JSONResponse(to_wire(_manager(request).get_prioritized_tasks()))

    return app
