from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from ministry.core.core import Service
from ministry.core.modules.user.models import User, UserRole
from ministry.core.modules.user.passwords import hash_password
from ministry.errors import DuplicateIdentityError, NotFoundError
from ministry.utils import now

logger = structlog.get_logger(__name__)

_STRING_ONLY = {"$type": "string"}


class UserService(Service):
    """User directory backed by the `users` collection.

    Users are always read from the database so role and activation changes
    apply on the next request.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def find_user(self, user_id: UUID) -> User | None:
        return User.from_mongo(await self._collection.find_one({"_id": user_id}))

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        user = await self.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def find_user_by_email(self, email: str) -> User | None:
        return User.from_mongo(await self._collection.find_one({"email": email}))

    async def find_user_by_username(self, username: str) -> User | None:
        return User.from_mongo(await self._collection.find_one({"username": username}))

    async def find_user_by_reset_token(self, token: str, valid_at: datetime) -> User | None:
        """Find the user holding `token` if it has not expired at `valid_at`."""
        document = await self._collection.find_one({"reset_token": token, "reset_token_expires": {"$gt": valid_at}})
        return User.from_mongo(document)

    async def get_all_users(self) -> list[User]:
        """Get all users, newest first."""
        return await User.list_cursor(self._collection.find().sort("created_at", -1))

    async def create_user(
        self,
        *,
        email: str | None,
        username: str | None,
        password: str | None,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
        role: UserRole = UserRole.STUDENT,
    ) -> User:
        """Create user with hashed password. Email is checked for uniqueness before username."""
        if email and await self.find_user_by_email(email) is not None:
            raise DuplicateIdentityError("Email already exists", field="email")
        if username and await self.find_user_by_username(username) is not None:
            raise DuplicateIdentityError("Username already exists", field="username")

        user = User(
            email=email,
            username=username,
            password_hash=await hash_password(password) if password else None,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            role=role,
        )
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            # Lost a race with a concurrent insert
            field = next(iter((e.details or {}).get("keyPattern", {})), "email")
            raise DuplicateIdentityError(f"{field.capitalize()} already exists", field=field) from e
        logger.info("user_created", user_id=str(user.id), role=user.role)
        return user

    async def update_profile(
        self, user_id: UUID, first_name: str | None, last_name: str | None, phone_number: str | None
    ) -> User:
        """Overwrite profile fields; empty values clear the field."""
        return await self._update(
            user_id,
            {"first_name": first_name or None, "last_name": last_name or None, "phone_number": phone_number or None},
        )

    async def update_role(self, user_id: UUID, role: UserRole) -> User:
        return await self._update(user_id, {"role": role})

    async def set_active(self, user_id: UUID, is_active: bool) -> User:
        return await self._update(user_id, {"is_active": is_active})

    async def set_reset_token(self, user_id: UUID, token: str, expires: datetime) -> None:
        """Store a reset token, replacing any pending one."""
        await self._update(user_id, {"reset_token": token, "reset_token_expires": expires})

    async def reset_password(self, user_id: UUID, password: str) -> None:
        """Set a new password and consume the reset token in a single write."""
        await self._update(
            user_id,
            {"password_hash": await hash_password(password), "reset_token": None, "reset_token_expires": None},
        )

    async def record_login(self, user_id: UUID) -> None:
        await self._collection.update_one({"_id": user_id}, {"$set": {"last_login_at": now()}})

    async def delete_user(self, user_id: UUID) -> None:
        """Permanently remove a user."""
        result = await self._collection.delete_one({"_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"User '{user_id}' not found")

    async def ensure_admin_user_exists(self) -> None:
        """Create the configured bootstrap admin if it does not exist."""
        config = self.core.config
        if not config.admin_email or not config.admin_password:
            return
        if await self.find_user_by_email(config.admin_email) is not None:
            return
        # Email-only admin when the "admin" username is taken
        username = "admin" if await self.find_user_by_username("admin") is None else None
        try:
            await self.create_user(
                email=config.admin_email,
                username=username,
                password=config.admin_password,
                first_name="System",
                last_name="Administrator",
                role=UserRole.ADMIN,
            )
        except DuplicateIdentityError as e:
            logger.warning("admin_bootstrap_skipped", email=config.admin_email, field=e.field)
            return
        logger.info("admin_user_bootstrapped", email=config.admin_email, username=username)

    async def _update(self, user_id: UUID, fields: dict[str, Any]) -> User:
        result = await self._collection.update_one({"_id": user_id}, {"$set": {**fields, "updated_at": now()}})
        if result.matched_count == 0:
            raise NotFoundError(f"User '{user_id}' not found")
        return await self.get_user(user_id)

    async def on_start(self) -> None:
        """Initialize indexes and the bootstrap admin."""
        await self._collection.create_index(
            [("email", 1)], unique=True, partialFilterExpression={"email": _STRING_ONLY}
        )
        await self._collection.create_index(
            [("username", 1)], unique=True, partialFilterExpression={"username": _STRING_ONLY}
        )
        await self._collection.create_index([("reset_token", 1)], sparse=True)
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started")
