"""
services/todo_service.py — Per-user todo CRUD.

Ownership rule:
  Every query is scoped by the caller's user id. A todo owned by someone
  else is reported exactly like a missing one (404 TODO_NOT_FOUND), never
  403, so callers cannot probe for the existence of other users' todos.

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility. Only flush here.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.errors import ErrorCode, NotFound
from backend.app.models.todo import Priority, Todo
from backend.app.models.user import User, isoformat_utc, utcnow


def _build_todo_dict(todo: Todo) -> dict:
    priority = todo.priority
    return {
        "id": todo.id,
        "userId": todo.user_id,
        "description": todo.description,
        "priority": priority.value if isinstance(priority, Priority) else priority,
        "done": bool(todo.done),
        "createdAt": isoformat_utc(todo.created_at),
        "updatedAt": isoformat_utc(todo.updated_at),
    }


def find_owned_todo(todo_id: str, owner_id: str, session: Session) -> Todo | None:
    """Returns the todo only if owner_id owns it."""
    return session.execute(
        select(Todo).where(Todo.id == todo_id, Todo.user_id == owner_id)
    ).scalar_one_or_none()


def _get_owned_todo_or_404(todo_id: str, owner_id: str, session: Session) -> Todo:
    todo = find_owned_todo(todo_id, owner_id, session)
    if todo is None:
        raise NotFound(ErrorCode.TODO_NOT_FOUND, "Todo not found.")
    return todo


def list_todos(owner_id: str, session: Session) -> list[dict]:
    todos = session.execute(
        select(Todo)
        .where(Todo.user_id == owner_id)
        .order_by(Todo.created_at.asc())
    ).scalars().all()
    return [_build_todo_dict(t) for t in todos]


def create_todo(
        owner_id: str,
        description: str,
        session: Session,
        priority: Priority | None = None,
) -> dict:
    """
    Creates a todo for owner_id. Priority defaults to low, done to false.

    Raises:
      NotFound(USER_NOT_FOUND, 404) - the session token outlived its user
      (account deleted while the cookie was still valid).
    """
    if session.get(User, owner_id) is None:
        raise NotFound(ErrorCode.USER_NOT_FOUND, "User not found.")

    todo = Todo(
        user_id=owner_id,
        description=description,
        priority=priority or Priority.LOW,
        done=False,
    )
    session.add(todo)
    session.flush()
    return _build_todo_dict(todo)


def get_todo(todo_id: str, owner_id: str, session: Session) -> dict:
    return _build_todo_dict(_get_owned_todo_or_404(todo_id, owner_id, session))


def update_todo(todo_id: str, owner_id: str, changes: dict, session: Session) -> dict:
    """
    Applies a partial update. `changes` holds only the fields the client sent
    (description, priority, done), already validated by TodoUpdateSchema.
    """
    todo = _get_owned_todo_or_404(todo_id, owner_id, session)

    if "description" in changes:
        todo.description = changes["description"]
    if "priority" in changes:
        todo.priority = changes["priority"]
    if "done" in changes:
        todo.done = changes["done"]

    # onupdate only fires for dirty rows; bump explicitly so an empty PUT
    # still reports a fresh updatedAt.
    todo.updated_at = utcnow()

    session.flush()
    return _build_todo_dict(todo)


def delete_todo(todo_id: str, owner_id: str, session: Session) -> None:
    todo = _get_owned_todo_or_404(todo_id, owner_id, session)
    session.delete(todo)
    session.flush()
