"""Unit tests for the request log context (no app, no DB)."""

import uuid
from types import SimpleNamespace

from app.core.middleware import request_log_context
from app.models.enums import UserRole
from app.services.access_scope import Actor


def test_anonymous_request_carries_correlation_id_only():
    request = SimpleNamespace(state=SimpleNamespace(request_id="req-1"))
    assert request_log_context(request) == {"correlation_id": "req-1"}


def test_authenticated_request_carries_role_and_branch():
    branch_id = uuid.uuid4()
    user_id = uuid.uuid4()
    actor = Actor(role=UserRole.ADMIN, branch_id=branch_id, user_id=user_id)
    request = SimpleNamespace(state=SimpleNamespace(request_id="req-2", actor=actor))

    context = request_log_context(request)
    assert context == {
        "correlation_id": "req-2",
        "actor_role": "ADMIN",
        "actor_branch_id": str(branch_id),
        "user_id": str(user_id),
    }


def test_super_admin_without_branch():
    actor = Actor(role=UserRole.SUPER_ADMIN)
    context = request_log_context(SimpleNamespace(state=SimpleNamespace(actor=actor)))
    assert context["correlation_id"] is None
    assert context["actor_role"] == "SUPER_ADMIN"
    assert context["actor_branch_id"] is None
