"""Task API endpoints. Every route requires an authenticated user."""

from fastapi import APIRouter, status

from tasktracker.api.deps import CurrentUserId, DBSession, TaskId
from tasktracker.errors import NotFoundError, ValidationError, server_errors
from tasktracker.models.task import (
    DESCRIPTION_MAX_LENGTH,
    Task,
    TaskChanges,
    TaskCreate,
    TaskEnvelope,
    TaskListEnvelope,
    TaskResponse,
    TaskUpdate,
)
from tasktracker.services.tasks import (
    create_task,
    delete_by_id_and_owner,
    get_by_id_and_owner,
    list_by_owner,
    toggle_completed,
    update_by_id_and_owner,
)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

TOO_LONG_MESSAGE = f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"


def _found(task: Task | None) -> TaskResponse:
    if task is None:
        raise NotFoundError("Task not found")
    return TaskResponse.model_validate(task)


@router.get("/", response_model=TaskListEnvelope)
def list_tasks_endpoint(session: DBSession, current_user_id: CurrentUserId) -> TaskListEnvelope:
    """List all tasks for the authenticated user, newest first."""
    with server_errors("Server error while fetching tasks"):
        tasks = list_by_owner(session, current_user_id)
    return TaskListEnvelope(
        count=len(tasks),
        tasks=[TaskResponse.model_validate(t) for t in tasks],
    )


@router.post("/add", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def add_task_endpoint(
    session: DBSession,
    current_user_id: CurrentUserId,
    task_data: TaskCreate,
) -> TaskEnvelope:
    """Create a new task for the authenticated user."""
    description = task_data.description
    if not description or not description.strip():
        raise ValidationError("Task description is required")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(TOO_LONG_MESSAGE)

    with server_errors("Server error while creating task"):
        task = create_task(
            session,
            current_user_id,
            description=description.strip(),
            priority=task_data.priority,
            due_date=task_data.due_date,
        )
    return TaskEnvelope(message="Task created successfully", task=TaskResponse.model_validate(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task_endpoint(
    session: DBSession,
    current_user_id: CurrentUserId,
    task_id: TaskId,
) -> TaskEnvelope:
    """Get a specific task by ID."""
    with server_errors("Server error while fetching task"):
        task = get_by_id_and_owner(session, task_id, current_user_id)
    return TaskEnvelope(task=_found(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task_endpoint(
    session: DBSession,
    current_user_id: CurrentUserId,
    task_id: TaskId,
    task_data: TaskUpdate,
) -> TaskEnvelope:
    """Update the supplied fields of a task."""
    supplied = task_data.model_fields_set
    description = task_data.description

    if "description" in supplied:
        if not description or not description.strip():
            raise ValidationError("Task description cannot be empty")
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(TOO_LONG_MESSAGE)

    changes = TaskChanges(
        description=description.strip() if description else None,
        completed=task_data.completed,
        priority=task_data.priority,
        due_date=task_data.due_date,
        due_date_set="due_date" in supplied,
    )

    with server_errors("Server error while updating task"):
        task = update_by_id_and_owner(session, task_id, current_user_id, changes)
    return TaskEnvelope(message="Task updated successfully", task=_found(task))


@router.delete("/{task_id}", response_model=TaskEnvelope)
def delete_task_endpoint(
    session: DBSession,
    current_user_id: CurrentUserId,
    task_id: TaskId,
) -> TaskEnvelope:
    """Delete a task and echo it back."""
    with server_errors("Server error while deleting task"):
        task = delete_by_id_and_owner(session, task_id, current_user_id)
    return TaskEnvelope(message="Task deleted successfully", task=_found(task))


@router.patch("/{task_id}/toggle", response_model=TaskEnvelope)
def toggle_task_endpoint(
    session: DBSession,
    current_user_id: CurrentUserId,
    task_id: TaskId,
) -> TaskEnvelope:
    """Toggle task completion status."""
    with server_errors("Server error while toggling task"):
        task = toggle_completed(session, task_id, current_user_id)
    response = _found(task)
    state = "completed" if response.completed else "incomplete"
    return TaskEnvelope(message=f"Task marked as {state}", task=response)
