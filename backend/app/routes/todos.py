"""
routes/todos.py — Todo route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return JSON.
  - No business logic. No DB queries.

Every route requires a session (@require_auth); mutating routes also
require the CSRF pair (@require_csrf). All queries are scoped to ctx.user_id.

Endpoints (url_prefix=/todos):
  GET    /todos        → 200  caller's todos
  POST   /todos        → 200  created todo
  GET    /todos/:id    → 200  todo (404 if missing or not owned)
  PUT    /todos/:id    → 200  updated todo
  DELETE /todos/:id    → 200  {message}
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.extensions import db
from backend.app.middleware.auth_middleware import RequestContext, require_auth, require_csrf
from backend.app.schemas.todo_schema import TodoCreateSchema, TodoUpdateSchema
from backend.app.services import todo_service

todos_bp = Blueprint("todos", __name__)


@todos_bp.route("", methods=["GET"], strict_slashes=False)
@require_auth
def list_todos(ctx: RequestContext):
    """GET /todos: the caller's todos, oldest first."""
    result = todo_service.list_todos(owner_id=ctx.user_id, session=db.session)
    return jsonify(result), 200


@todos_bp.route("", methods=["POST"], strict_slashes=False)
@require_auth
@require_csrf
def create_todo(ctx: RequestContext):
    """POST /todos: create a todo owned by the caller."""
    data = TodoCreateSchema().load(request.get_json(force=True) or {})
    result = todo_service.create_todo(
        owner_id=ctx.user_id,
        description=data["description"],
        priority=data.get("priority"),
        session=db.session,
    )
    db.session.commit()
    return jsonify(result), 200


@todos_bp.route("/<string:todo_id>", methods=["GET"])
@require_auth
def get_todo(todo_id: str, ctx: RequestContext):
    """GET /todos/:id: one of the caller's todos."""
    result = todo_service.get_todo(todo_id=todo_id, owner_id=ctx.user_id, session=db.session)
    return jsonify(result), 200


@todos_bp.route("/<string:todo_id>", methods=["PUT"])
@require_auth
@require_csrf
def update_todo(todo_id: str, ctx: RequestContext):
    """PUT /todos/:id: partial update of description, priority or done."""
    changes = TodoUpdateSchema().load(request.get_json(force=True) or {})
    result = todo_service.update_todo(
        todo_id=todo_id,
        owner_id=ctx.user_id,
        changes=changes,
        session=db.session,
    )
    db.session.commit()
    return jsonify(result), 200


@todos_bp.route("/<string:todo_id>", methods=["DELETE"])
@require_auth
@require_csrf
def delete_todo(todo_id: str, ctx: RequestContext):
    """DELETE /todos/:id: remove one of the caller's todos."""
    todo_service.delete_todo(todo_id=todo_id, owner_id=ctx.user_id, session=db.session)
    db.session.commit()
    return jsonify({"message": "Todo deleted successfully."}), 200
