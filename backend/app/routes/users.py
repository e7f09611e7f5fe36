"""
routes/users.py — User profile route handlers.

Reads are public and return sanitised users. Update/delete require a
session, the CSRF pair, and that the session's user id equals the path id
(403 FORBIDDEN otherwise, checked in user_service).

Endpoints (url_prefix=/users):
  GET    /users        → 200  all users
  GET    /users/:id    → 200  one user (404 if missing)
  PUT    /users/:id    → 200  updated user
  DELETE /users/:id    → 200  {message}; the user's todos are deleted too
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.extensions import db
from backend.app.middleware.auth_middleware import RequestContext, require_auth, require_csrf
from backend.app.schemas.user_schema import UserUpdateSchema
from backend.app.services import user_service

users_bp = Blueprint("users", __name__)


@users_bp.route("", methods=["GET"], strict_slashes=False)
def list_users():
    """GET /users: public profiles of every user."""
    return jsonify(user_service.list_users(session=db.session)), 200


@users_bp.route("/<string:user_id>", methods=["GET"])
def get_user(user_id: str):
    """GET /users/:id: one public profile."""
    return jsonify(user_service.get_user(user_id=user_id, session=db.session)), 200


@users_bp.route("/<string:user_id>", methods=["PUT"])
@require_auth
@require_csrf
def update_user(user_id: str, ctx: RequestContext):
    """PUT /users/:id: change your own username or email."""
    data = UserUpdateSchema().load(request.get_json(force=True) or {})
    result = user_service.update_user(
        user_id=user_id,
        caller_id=ctx.user_id,
        username=data.get("username"),
        email=data.get("email"),
        session=db.session,
    )
    db.session.commit()
    return jsonify(result), 200


@users_bp.route("/<string:user_id>", methods=["DELETE"])
@require_auth
@require_csrf
def delete_user(user_id: str, ctx: RequestContext):
    """DELETE /users/:id: delete your own account and its todos."""
    user_service.delete_user(user_id=user_id, caller_id=ctx.user_id, session=db.session)
    db.session.commit()
    return jsonify({"message": "User and associated todos deleted."}), 200
