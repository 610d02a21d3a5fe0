"""Integration tests for UserService against an in-memory SQLite database."""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.errors import (
    ConflictError,
    InvalidTokenError,
    NoContentError,
    NotFoundError,
    UnauthorizedError,
)
from user_api.core.security import hash_password, verify_password
from user_api.models.site import Site
from user_api.models.user import User
from user_api.models.user_permission import UserPermission
from user_api.schemas.auth import LoginRequest
from user_api.schemas.user import SitePermissionInput, UserCreateRequest, UserUpdateRequest
from user_api.services.user_service import UserService


async def _count(session: AsyncSession, model: type) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def _insert_user(session: AsyncSession, username: str, created_at: datetime) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        password=hash_password("password123"),
        full_name=username.title(),
        created_at=created_at,
    )
    session.add(user)
    await session.commit()
    return user


class TestFindAll:
    """Listing, ordering and pagination."""

    async def test_empty_database_raises_no_content(self, user_service: UserService) -> None:
        with pytest.raises(NoContentError):
            await user_service.find_all(0, 20)

    async def test_admin_only_raises_no_content(self, user_service: UserService, admin_user: User) -> None:
        with pytest.raises(NoContentError):
            await user_service.find_all(0, 20)

    async def test_newest_first_with_offset_and_limit(
        self,
        user_service: UserService,
        async_session: AsyncSession,
        admin_user: User,
    ) -> None:
        base = datetime(2025, 1, 1, tzinfo=UTC)
        for i, name in enumerate(["first", "second", "third", "fourth"]):
            await _insert_user(async_session, name, base + timedelta(minutes=i))

        everyone = await user_service.find_all(0, 20)
        assert [u.username for u in everyone] == ["fourth", "third", "second", "first"]

        page = await user_service.find_all(offset=1, limit=2)
        assert [u.username for u in page] == ["third", "second"]

        with pytest.raises(NoContentError):
            await user_service.find_all(offset=4, limit=2)

    async def test_inactive_users_listed_by_default(
        self,
        user_service: UserService,
        async_session: AsyncSession,
    ) -> None:
        user = await _insert_user(async_session, "ghost", datetime(2025, 1, 1, tzinfo=UTC))
        await user_service.delete(user.id)

        assert [u.username for u in await user_service.find_all(0, 20)] == ["ghost"]

    async def test_active_only_policy_hides_inactive_users(
        self,
        user_service: UserService,
        async_session: AsyncSession,
    ) -> None:
        user = await _insert_user(async_session, "ghost", datetime(2025, 1, 1, tzinfo=UTC))
        await user_service.delete(user.id)
        user_service.settings = user_service.settings.model_copy(update={"list_active_only": True})

        with pytest.raises(NoContentError):
            await user_service.find_all(0, 20)


class TestCreateAndLogin:
    """Account creation followed by authentication."""

    async def test_alice_with_one_site(
        self,
        user_service: UserService,
        async_session: AsyncSession,
        sample_site: Site,
    ) -> None:
        created = await user_service.create(
            UserCreateRequest(
                username="alice",
                password="alice-password",
                full_name="Alice",
                sites=[SitePermissionInput(site_id=sample_site.id, permissions=["read"])],
            )
        )

        assert created.is_active is True
        assert created.is_locked is False
        assert await _count(async_session, UserPermission) == 1

        response = await user_service.login(LoginRequest(username="alice", password="alice-password"))
        assert [site.id for site in response.sites] == [sample_site.id]
        assert [site.name for site in response.sites] == ["S1"]

        resolved = await user_service.find_one_by_token(response.token)
        assert resolved is not None
        assert resolved.id == created.id

    async def test_password_is_stored_hashed(self, user_service: UserService) -> None:
        created = await user_service.create(UserCreateRequest(username="bob", password="bob-password"))

        stored = await user_service.find_by_id(created.id)
        assert stored.password != "bob-password"
        assert verify_password("bob-password", stored.password)

    async def test_duplicate_username_conflicts_without_mutation(
        self,
        user_service: UserService,
        async_session: AsyncSession,
    ) -> None:
        await user_service.create(UserCreateRequest(username="carol", password="first-password", full_name="One"))

        with pytest.raises(ConflictError):
            await user_service.create(
                UserCreateRequest(username="carol", password="second-password", full_name="Two")
            )

        assert await _count(async_session, User) == 1
        existing = await user_service.repository.find_by_username("carol")
        assert existing is not None
        assert existing.full_name == "One"

    async def test_store_constraint_catches_duplicate_when_precheck_misses(
        self,
        user_service: UserService,
        async_session: AsyncSession,
    ) -> None:
        await _insert_user(async_session, "dave", datetime(2025, 1, 1, tzinfo=UTC))
        original_lookup = user_service.repository.find_by_username
        user_service.repository.find_by_username = AsyncMock(return_value=None)  # type: ignore[method-assign]

        with pytest.raises(ConflictError):
            await user_service.create(UserCreateRequest(username="dave", password="password123"))

        user_service.repository.find_by_username = original_lookup  # type: ignore[method-assign]
        assert await _count(async_session, User) == 1

    async def test_unknown_site_persists_nothing(
        self,
        user_service: UserService,
        async_session: AsyncSession,
        sample_site: Site,
    ) -> None:
        missing = uuid.uuid4()
        with pytest.raises(NotFoundError) as exc_info:
            await user_service.create(
                UserCreateRequest(
                    username="erin",
                    password="password123",
                    sites=[
                        SitePermissionInput(site_id=sample_site.id, permissions=["read"]),
                        SitePermissionInput(site_id=missing, permissions=["write"]),
                    ],
                )
            )

        assert exc_info.value.details == {"site_ids": [str(missing)]}
        assert await _count(async_session, User) == 0
        assert await _count(async_session, UserPermission) == 0

    async def test_bad_credentials_fail_identically(self, user_service: UserService) -> None:
        await user_service.create(UserCreateRequest(username="frank", password="right-password"))

        with pytest.raises(UnauthorizedError) as wrong_password:
            await user_service.login(LoginRequest(username="frank", password="wrong-password"))
        with pytest.raises(UnauthorizedError) as unknown_user:
            await user_service.login(LoginRequest(username="nobody", password="right-password"))

        assert (wrong_password.value.message, wrong_password.value.code) == (
            unknown_user.value.message,
            unknown_user.value.code,
        )

    async def test_tampered_token_is_invalid(self, user_service: UserService) -> None:
        await user_service.create(UserCreateRequest(username="grace", password="grace-password"))
        token = (await user_service.login(LoginRequest(username="grace", password="grace-password"))).token
        header, payload, signature = token.split(".")

        with pytest.raises(InvalidTokenError):
            await user_service.find_one_by_token(f"{header}.{payload}x.{signature}")

    async def test_token_for_deleted_user_returns_none(
        self,
        user_service: UserService,
        admin_user: User,
    ) -> None:
        await user_service.create(UserCreateRequest(username="heidi", password="heidi-password"))
        token = (await user_service.login(LoginRequest(username="heidi", password="heidi-password"))).token
        await user_service.delete_all()

        assert await user_service.find_one_by_token(token) is None
        with pytest.raises(NotFoundError):
            await user_service.find_one_by_token(token, required=True)


class TestUpdate:
    """Profile updates and permission appends."""

    async def test_updates_full_name_only(self, user_service: UserService, sample_site: Site) -> None:
        created = await user_service.create(
            UserCreateRequest(username="ivan", password="ivan-password", full_name="Ivan")
        )
        original_password = created.password

        result = await user_service.update(
            created.id,
            UserUpdateRequest(
                full_name="Ivan the Second",
                sites=[SitePermissionInput(site_id=sample_site.id, permissions=["admin"])],
            ),
        )

        assert result is True
        updated = await user_service.find_by_id(created.id)
        assert updated.full_name == "Ivan the Second"
        assert updated.username == "ivan"
        assert updated.password == original_password

        response = await user_service.login(LoginRequest(username="ivan", password="ivan-password"))
        assert [site.id for site in response.sites] == [sample_site.id]

    async def test_grants_accumulate(
        self,
        user_service: UserService,
        async_session: AsyncSession,
        sample_site: Site,
    ) -> None:
        entry = SitePermissionInput(site_id=sample_site.id, permissions=["read"])
        created = await user_service.create(UserCreateRequest(username="judy", password="judy-password", sites=[entry]))
        await user_service.update(created.id, UserUpdateRequest(full_name="Judy", sites=[entry]))

        grants = await user_service.permission_service.find_all_by_user_id(created.id)
        assert len(grants) == 2

        # Duplicate grants resolve to a single site on login
        response = await user_service.login(LoginRequest(username="judy", password="judy-password"))
        assert len(response.sites) == 1

    async def test_missing_user_raises_not_found(self, user_service: UserService, async_session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await user_service.update(uuid.uuid4(), UserUpdateRequest(full_name="Nobody"))
        assert await _count(async_session, User) == 0


class TestDeleteAndLock:
    """Soft delete, bulk delete and lock toggling."""

    async def test_delete_is_idempotent(self, user_service: UserService) -> None:
        created = await user_service.create(UserCreateRequest(username="kim", password="kim-password"))

        assert await user_service.delete(created.id) is True
        assert await user_service.delete(created.id) is True

        stored = await user_service.find_by_id(created.id)
        assert stored.is_active is False

    async def test_delete_all_keeps_admin(
        self,
        user_service: UserService,
        async_session: AsyncSession,
        admin_user: User,
    ) -> None:
        await user_service.create(UserCreateRequest(username="leo", password="leo-password"))
        await user_service.create(UserCreateRequest(username="mia", password="mia-password"))

        assert await user_service.delete_all() is True

        with pytest.raises(NoContentError):
            await user_service.find_all(0, 20)
        assert await _count(async_session, User) == 1
        assert (await user_service.find_by_id(admin_user.id)).username == "admin"

    async def test_delete_all_on_empty_store(self, user_service: UserService) -> None:
        assert await user_service.delete_all() is True

    async def test_lock_toggle_is_an_involution(self, user_service: UserService) -> None:
        created = await user_service.create(UserCreateRequest(username="ned", password="ned-password"))

        await user_service.lock_and_unlock_user(created.id)
        assert (await user_service.find_by_id(created.id)).is_locked is True

        await user_service.lock_and_unlock_user(created.id)
        assert (await user_service.find_by_id(created.id)).is_locked is False

    async def test_locked_user_can_log_in_by_default(self, user_service: UserService) -> None:
        created = await user_service.create(UserCreateRequest(username="olga", password="olga-password"))
        await user_service.lock_and_unlock_user(created.id)

        response = await user_service.login(LoginRequest(username="olga", password="olga-password"))
        assert response.token

    async def test_locked_user_rejected_under_policy(self, user_service: UserService) -> None:
        created = await user_service.create(UserCreateRequest(username="pete", password="pete-password"))
        await user_service.lock_and_unlock_user(created.id)
        user_service.settings = user_service.settings.model_copy(update={"login_rejects_locked": True})

        with pytest.raises(UnauthorizedError):
            await user_service.login(LoginRequest(username="pete", password="pete-password"))

    async def test_lock_missing_user(self, user_service: UserService) -> None:
        with pytest.raises(NotFoundError):
            await user_service.lock_and_unlock_user(uuid.uuid4())
