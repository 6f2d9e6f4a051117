from fastapi import APIRouter

from taskboard.api.routes import logs, tasks, users, utils

api_router = APIRouter()
api_router.include_router(users.router)
api_router.include_router(tasks.router)
api_router.include_router(logs.router)
api_router.include_router(utils.router)

# 400 messages for request validation failures, keyed by endpoint name
VALIDATION_MESSAGES: dict[str, str] = {
    users.create_user.__name__: "Invalid user data",
    tasks.update_user_tasks.__name__: "Tasks must be an array",
    logs.create_task_log.__name__: "Invalid log data",
}
DEFAULT_VALIDATION_MESSAGE = "Invalid request data"
