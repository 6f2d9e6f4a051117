"""
Server-rendered pages for the user submission flow and the admin panel.

Forms post to the handlers below, which call storage and redirect back to
the page with a ``notice`` query parameter. The admin unlock code only hides
the panel: it is a convenience gate, not access control, and the REST API
stays open regardless.
"""

from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from taskboard.api.deps import StorageDep
from taskboard.core.config import settings
from taskboard.core.observability import get_logger
from taskboard.models import TaskLogCreate, TaskStatus, UserCreate

logger = get_logger(__name__)
router = APIRouter(include_in_schema=False)

templates = Jinja2Templates(directory=Path(__file__).parent.parent / "templates")

ADMIN_COOKIE = "admin_unlocked"


def parse_task_list(text: str) -> list[str]:
    """Split comma-separated task names, dropping blanks."""
    return [task.strip() for task in text.split(",") if task.strip()]


def redirect(path: str, **params: str) -> RedirectResponse:
    query = urlencode({k: v for k, v in params.items() if v})
    url = f"{path}?{query}" if query else path
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def is_admin_unlocked(request: Request) -> bool:
    return request.cookies.get(ADMIN_COOKIE) == "1"


# User submission flow


@router.get("/", response_class=HTMLResponse)
def user_page(
    request: Request, storage: StorageDep, user: str = "", notice: str = ""
):
    users = storage.list_users()
    selected = storage.get_user(user) if user else None
    logs = storage.list_task_logs_by_user(selected.name) if selected else []
    return templates.TemplateResponse(
        request,
        "user.html",
        {
            "users": users,
            "selected": selected,
            "logs": logs,
            "statuses": list(TaskStatus),
            "notice": notice,
        },
    )


@router.post("/submit")
def submit_task(
    storage: StorageDep,
    user: str = Form(...),
    task: str = Form(""),
    custom_task: str = Form(""),
    status_: TaskStatus = Form(TaskStatus.COMPLETED, alias="status"),
    comment: str = Form(""),
):
    chosen = custom_task.strip() or task.strip()
    if not chosen:
        return redirect("/", user=user, notice="Please select or enter a task.")
    if not storage.get_user(user):
        return redirect("/", notice="User not found.")

    storage.create_task_log(
        TaskLogCreate(user=user, task=chosen, status=status_, comment=comment.strip())
    )
    return redirect("/", user=user, notice=f"Task '{chosen}' submitted.")


# Admin panel


@router.get("/admin", response_class=HTMLResponse)
def admin_page(request: Request, storage: StorageDep, notice: str = ""):
    if not is_admin_unlocked(request):
        return templates.TemplateResponse(
            request, "admin_locked.html", {"notice": notice}
        )

    users = storage.list_users()
    projects = {u.name: u.project for u in reversed(users)}
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "users": users,
            "logs": storage.list_task_logs(),
            "projects": projects,
            "notice": notice,
        },
    )


@router.post("/admin/unlock")
def unlock_admin(code: str = Form("")):
    if code != settings.ADMIN_UNLOCK_CODE:
        logger.info("Admin unlock rejected")
        return redirect("/admin", notice="Incorrect admin code.")

    response = redirect("/admin", notice="Admin panel unlocked.")
    response.set_cookie(ADMIN_COOKIE, "1", httponly=True, samesite="lax")
    return response


@router.post("/admin/lock")
def lock_admin():
    response = redirect("/admin")
    response.delete_cookie(ADMIN_COOKIE)
    return response


@router.post("/admin/users")
def add_user(
    request: Request,
    storage: StorageDep,
    name: str = Form(""),
    project: str = Form(""),
    tasks: str = Form(""),
):
    if not is_admin_unlocked(request):
        return redirect("/admin")
    try:
        user_in = UserCreate.model_validate(
            {
                "name": name.strip(),
                "project": project.strip(),
                "tasks": parse_task_list(tasks),
            }
        )
    except ValidationError:
        return redirect("/admin", notice="Name and project are required.")

    storage.create_user(user_in)
    return redirect("/admin", notice=f"User '{user_in.name}' added.")


@router.post("/admin/users/delete")
def remove_user(request: Request, storage: StorageDep, name: str = Form("")):
    if not is_admin_unlocked(request):
        return redirect("/admin")
    if storage.delete_user(name):
        return redirect("/admin", notice=f"User '{name}' deleted.")
    return redirect("/admin", notice="User not found.")


@router.post("/admin/tasks")
def assign_tasks(
    request: Request,
    storage: StorageDep,
    user: str = Form(""),
    tasks: str = Form(""),
):
    if not is_admin_unlocked(request):
        return redirect("/admin")
    if storage.update_user_tasks(user, parse_task_list(tasks)) is None:
        return redirect("/admin", notice="User not found.")
    return redirect("/admin", notice=f"Tasks updated for '{user}'.")


@router.post("/admin/logs/clear")
def clear_logs(request: Request, storage: StorageDep):
    if not is_admin_unlocked(request):
        return redirect("/admin")
    removed = storage.clear_task_logs()
    return redirect("/admin", notice=f"Cleared {removed} task logs.")
