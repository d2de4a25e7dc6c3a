import pytest

from ministry.core.modules.session.models import SessionId
from ministry.core.modules.user.models import UserRole
from ministry.errors import AccessDeniedError, AuthenticationError


async def test_ensure_authenticated_returns_user(core, alice):
    session_id = await core.services.session.create_session(alice.id)
    user = await core.services.access.ensure_authenticated(session_id)
    assert user.id == alice.id


async def test_ensure_authenticated_rejects_unknown_session(core):
    with pytest.raises(AuthenticationError):
        await core.services.access.ensure_authenticated(SessionId("nope"))


async def test_ensure_admin_rejects_student(core, alice):
    session_id = await core.services.session.create_session(alice.id)
    with pytest.raises(AccessDeniedError, match="Admin access required"):
        await core.services.access.ensure_admin(session_id)


async def test_ensure_admin_rejects_instructor(core, alice):
    await core.services.user.update_role(alice.id, UserRole.INSTRUCTOR)
    session_id = await core.services.session.create_session(alice.id)
    with pytest.raises(AccessDeniedError):
        await core.services.access.ensure_admin(session_id)


async def test_ensure_admin_unauthenticated_is_401_not_403(core):
    with pytest.raises(AuthenticationError):
        await core.services.access.ensure_admin(SessionId("nope"))


async def test_role_change_applies_to_existing_session(core, alice):
    session_id = await core.services.session.create_session(alice.id)
    await core.services.user.update_role(alice.id, UserRole.ADMIN)
    assert (await core.services.access.ensure_admin(session_id)).id == alice.id

    await core.services.user.update_role(alice.id, UserRole.STUDENT)
    with pytest.raises(AccessDeniedError):
        await core.services.access.ensure_admin(session_id)
