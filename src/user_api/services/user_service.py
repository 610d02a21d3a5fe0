"""User management and authentication service.

Handles listing, creation, profile updates, soft and bulk deletion,
lock/unlock, login token issuance, and token resolution. Site permission
grants requested by ``create`` and ``update`` are validated up front and
written in the same transaction as the user, so the call either persists
everything or nothing.
"""

import asyncio
import uuid
from collections.abc import Sequence

import jwt
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.config import Settings
from user_api.core.errors import (
    ConflictError,
    InvalidTokenError,
    NoContentError,
    NotFoundError,
    UnauthorizedError,
)
from user_api.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from user_api.models.user import User
from user_api.repositories.user_repository import UserRepository
from user_api.schemas.auth import LoginRequest, LoginResponse
from user_api.schemas.site import SiteResponse
from user_api.schemas.user import SitePermissionInput, UserCreateRequest, UserUpdateRequest
from user_api.services.site_service import SiteService
from user_api.services.user_permission_service import UserPermissionService


class UserService:
    """Business logic for user accounts.

    Args:
        repository: Data access for users.
        permission_service: Storage for per-site permission grants.
        site_service: Site existence checks and lookups.
        settings: Signing secret, issuer, token lifetime, admin username and
            login/listing policy flags.
    """

    def __init__(
        self,
        repository: UserRepository,
        permission_service: UserPermissionService,
        site_service: SiteService,
        settings: Settings,
    ) -> None:
        self.repository = repository
        self.permission_service = permission_service
        self.site_service = site_service
        self.settings = settings

    async def find_all(self, offset: int = 0, limit: int = 20) -> list[User]:
        """List non-admin users, newest first.

        Raises:
            NoContentError: If the page is empty.
        """
        users = await self.repository.find_all_except(
            self.settings.admin_username,
            offset=offset,
            limit=limit,
            active_only=self.settings.list_active_only,
        )
        if not users:
            raise NoContentError("No Content")
        return users

    async def find_by_id(self, user_id: uuid.UUID) -> User:
        """Return the user with ``user_id``.

        Raises:
            NotFoundError: If no such user exists.
        """
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("Not Found: User")
        return user

    async def create(self, request: UserCreateRequest) -> User:
        """Create a user and grant the requested site permissions.

        Args:
            request: Username, plaintext password, full name and site grants.

        Returns:
            The created User.

        Raises:
            ConflictError: If the username is already taken.
            NotFoundError: If any referenced site does not exist. Nothing is
                persisted in that case.
        """
        existing = await self.repository.find_by_username(request.username)
        if existing is not None:
            raise ConflictError("Conflict: Username", details={"username": request.username})

        await self._validate_sites(request.sites)

        user = User(
            id=uuid.uuid4(),
            username=request.username,
            password=await asyncio.to_thread(hash_password, request.password),
            full_name=request.full_name,
        )
        self.repository.add(user)
        try:
            await self._grant_sites(user.id, request.sites)
            user = await self.repository.save(user)
        except IntegrityError:
            # users.username is the only unique constraint a create can hit; narrow this
            # if user_permissions or users gain another one.
            await self.repository.rollback()
            raise ConflictError("Conflict: Username", details={"username": request.username}) from None

        logger.info(f"Created user {user.id} ({user.username}) with {len(request.sites)} site grant(s)")
        return user

    async def update(self, user_id: uuid.UUID, request: UserUpdateRequest) -> bool:
        """Update a user's full name and append site permission grants.

        Raises:
            NotFoundError: If the user, or any referenced site, does not exist.
        """
        user = await self.find_by_id(user_id)
        await self._validate_sites(request.sites)

        user.full_name = request.full_name
        await self._grant_sites(user.id, request.sites)
        await self.repository.save(user)

        logger.info(f"Updated user {user.id} with {len(request.sites)} new site grant(s)")
        return True

    async def delete(self, user_id: uuid.UUID) -> bool:
        """Soft-delete a user by marking it inactive.

        The admin account cannot be deactivated.

        Raises:
            NotFoundError: If no such user exists.
            ConflictError: If ``user_id`` is the admin account.
        """
        user = await self.find_by_id(user_id)
        if user.username == self.settings.admin_username:
            logger.warning(f"Refused to deactivate admin account {user.id}")
            raise ConflictError("Conflict: Admin", details={"username": user.username})
        user.is_active = False
        saved = await self.repository.save(user)
        logger.info(f"Deactivated user {user.id} ({user.username})")
        return saved is not None

    async def delete_all(self) -> bool:
        """Physically delete every user except the admin account.

        Returns:
            True once the store accepted the delete, regardless of how many
            rows it removed.
        """
        removed = await self.repository.delete_all_except(self.settings.admin_username)
        logger.warning(f"Deleted {removed} non-admin user(s)")
        return True

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Check credentials and issue a signed token.

        Unknown usernames and wrong passwords fail identically.

        Raises:
            UnauthorizedError: If the credentials are rejected.
        """
        user = await self.repository.find_by_username(request.username)
        if user is None:
            await asyncio.to_thread(verify_password, request.password, DUMMY_PASSWORD_HASH)
            logger.warning("Rejected login for unknown username")
            raise UnauthorizedError("Unauthorized")
        if not await asyncio.to_thread(verify_password, request.password, user.password):
            logger.warning(f"Rejected login for user {user.id}: bad password")
            raise UnauthorizedError("Unauthorized")
        if self.settings.login_rejects_locked and user.is_locked:
            logger.warning(f"Rejected login for user {user.id}: account locked")
            raise UnauthorizedError("Unauthorized")
        if self.settings.login_rejects_inactive and not user.is_active:
            logger.warning(f"Rejected login for user {user.id}: account inactive")
            raise UnauthorizedError("Unauthorized")

        token = create_access_token(
            subject=str(user.id),
            audience=user.username,
            secret_key=self.settings.jwt_secret_key,
            issuer=self.settings.jwt_issuer,
            algorithm=self.settings.jwt_algorithm,
            expires_days=self.settings.jwt_expire_days,
        )

        grants = await self.permission_service.find_all_by_user_id(user.id)
        sites = await self.site_service.find_all_by_ids([grant.site_id for grant in grants])

        logger.info(f"User {user.id} logged in")
        return LoginResponse(token=token, sites=[SiteResponse.model_validate(site) for site in sites])

    async def find_one_by_token(self, token: str, *, required: bool = False) -> User | None:
        """Resolve a login token to its user.

        Args:
            token: A token issued by ``login``.
            required: Raise instead of returning None when the token is valid
                but its user no longer exists.

        Raises:
            InvalidTokenError: If the token is malformed, expired, tampered
                with, or from another issuer.
            NotFoundError: If ``required`` and the user does not exist.
        """
        try:
            payload = decode_token(
                token,
                self.settings.jwt_secret_key,
                issuer=self.settings.jwt_issuer,
                algorithm=self.settings.jwt_algorithm,
            )
            user_id = uuid.UUID(payload["sub"])
        except (jwt.PyJWTError, KeyError, ValueError) as e:
            raise InvalidTokenError("Invalid Token") from e

        user = await self.repository.find_by_id(user_id)
        if user is None and required:
            raise NotFoundError("Not Found: User")
        return user

    async def lock_and_unlock_user(self, user_id: uuid.UUID) -> bool:
        """Toggle a user's lock flag.

        Raises:
            NotFoundError: If no such user exists.
        """
        user = await self.find_by_id(user_id)
        user.is_locked = not user.is_locked
        saved = await self.repository.save(user)
        logger.info(f"{'Locked' if user.is_locked else 'Unlocked'} user {user.id}")
        return saved is not None

    async def _validate_sites(self, entries: Sequence[SitePermissionInput]) -> None:
        """Ensure every referenced site exists, reporting all missing ids at once."""
        if not entries:
            return
        requested = {entry.site_id for entry in entries}
        found = {site.id for site in await self.site_service.find_all_by_ids(requested)}
        missing = sorted(str(site_id) for site_id in requested - found)
        if missing:
            raise NotFoundError("Not Found: Site", details={"site_ids": missing})

    async def _grant_sites(self, user_id: uuid.UUID, entries: Sequence[SitePermissionInput]) -> None:
        for entry in entries:
            await self.permission_service.create(
                user_id=user_id,
                site_id=entry.site_id,
                permissions=entry.permissions,
            )


def build_user_service(session: AsyncSession, settings: Settings) -> UserService:
    """Wire a UserService and its collaborators onto one session."""
    return UserService(
        repository=UserRepository(session),
        permission_service=UserPermissionService(session),
        site_service=SiteService(session),
        settings=settings,
    )
