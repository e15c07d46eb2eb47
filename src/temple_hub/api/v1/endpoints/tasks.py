"""Community task board endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError, ensure_identifier
from temple_hub.db.time import utcnow
from temple_hub.models import Community, Task
from temple_hub.models.activity import TASK_STATUS_COMPLETED
from temple_hub.schemas.activity import TaskCreate, TaskResponse, TaskUpdate
from temple_hub.schemas.common import Envelope, MessageEnvelope, listing, ok

from ..dependencies import CommunityDep, SessionDep

router = APIRouter(prefix="/communities", tags=["tasks"])


def _get_task(db: Session, community: Community, task_id: str) -> Task:
    task_id = ensure_identifier(task_id, label="task ID")
    task = db.get(Task, task_id)
    if task is None or task.community_id != community.id:
        raise NotFoundError("Task not found", meta={"task_id": task_id})
    return task


@router.get("/{community_id}/tasks", response_model=Envelope[list[TaskResponse]])
async def list_tasks(
    community: CommunityDep,
    db: SessionDep,
    status: str | None = None,
    priority: str | None = None,
) -> dict[str, object]:
    """List tasks newest first; ``all`` disables a filter."""
    query = db.query(Task).filter(Task.community_id == community.id)
    if status and status != "all":
        query = query.filter(Task.status == status)
    if priority and priority != "all":
        query = query.filter(Task.priority == priority)
    return listing(query.order_by(desc(Task.created_at)).all())


@router.post(
    "/{community_id}/tasks",
    response_model=Envelope[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_task(community: CommunityDep, payload: TaskCreate, db: SessionDep) -> dict[str, object]:
    """Create a task; the creator is optional."""
    task = Task(community_id=community.id, **payload.model_dump())
    if task.status == TASK_STATUS_COMPLETED:
        task.completed_at = utcnow()
    db.add(task)
    db.commit()
    db.refresh(task)
    return ok(task, "Task created successfully")


@router.put("/{community_id}/tasks/{task_id}", response_model=Envelope[TaskResponse])
async def update_task(
    community: CommunityDep,
    task_id: str,
    changes: TaskUpdate,
    db: SessionDep,
) -> dict[str, object]:
    """Update a task; moving it to ``completed`` stamps ``completed_at``."""
    task = _get_task(db, community, task_id)
    update_data = changes.changes()
    if update_data.get("status") == TASK_STATUS_COMPLETED and not update_data.get("completed_at"):
        update_data["completed_at"] = utcnow()
    for key, value in update_data.items():
        setattr(task, key, value)
    db.commit()
    db.refresh(task)
    return ok(task, "Task updated successfully")


@router.delete("/{community_id}/tasks/{task_id}", response_model=MessageEnvelope)
async def delete_task(community: CommunityDep, task_id: str, db: SessionDep) -> dict[str, object]:
    """Delete a task."""
    task = _get_task(db, community, task_id)
    db.delete(task)
    db.commit()
    return {"success": True, "message": "Task deleted successfully"}
