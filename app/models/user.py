# app/models/user.py
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.error_messages import ErrorMessages
from app.core.errors import Conflict, InvalidArgument, UserNotFound
from app.schemas.user import Role, UserStatus, normalize_email

# Keys that only the repository itself writes
PROTECTED_KEYS = frozenset({"_id", "passwordHash", "version", "createdAt"})


def parse_object_id(user_id: str) -> ObjectId:
    if not ObjectId.is_valid(user_id):
        raise InvalidArgument(ErrorMessages.MALFORMED_USER_ID)
    return ObjectId(user_id)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserRepository:
    """Data access for the ``users`` collection.

    Every operation touches a single document, so each one is atomic on the
    server. Email uniqueness is guaranteed by the unique index created in
    :meth:`ensure_indexes`; the lookup in :meth:`find_by_email` is only an
    early check and can race.
    """

    def __init__(self, collection):
        self.collection = collection

    async def ensure_indexes(self):
        await self.collection.create_index("email", unique=True)

    async def count_all(self) -> int:
        return await self.collection.count_documents({})

    async def list_all(self) -> list:
        return await self.collection.find({}).to_list(length=None)

    async def find_by_id(self, user_id: str) -> dict:
        oid = parse_object_id(user_id)
        user = await self.collection.find_one({"_id": oid})
        if not user:
            raise UserNotFound()
        return user

    async def find_by_email(self, email: str):
        return await self.collection.find_one({"email": normalize_email(email)})

    async def create(self, fields: dict) -> dict:
        now = _now()
        doc = {
            **fields,
            "email": normalize_email(fields["email"]),
            "role": fields.get("role", Role.USER.value),
            "status": UserStatus.ACTIVE.value,
            "avatar": fields.get("avatar"),
            "version": 0,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict(ErrorMessages.EMAIL_EXISTS)
        doc["_id"] = result.inserted_id
        return doc

    async def update_by_id(self, user_id: str, fields: dict) -> dict:
        """Shallow-merge ``fields`` into the user document."""
        blocked = PROTECTED_KEYS.intersection(fields)
        if blocked:
            raise InvalidArgument(ErrorMessages.PROTECTED_FIELD.format(field=", ".join(sorted(blocked))))
        oid = parse_object_id(user_id)
        values = dict(fields)
        if "email" in values:
            values["email"] = normalize_email(values["email"])
        values["updatedAt"] = _now()
        try:
            user = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": values, "$inc": {"version": 1}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise Conflict(ErrorMessages.DUPLICATED_EMAIL)
        if not user:
            raise UserNotFound()
        return user

    async def soft_delete(self, user_id: str) -> dict:
        return await self.update_by_id(user_id, {"status": UserStatus.DELETED.value})

    async def set_avatar(self, user_id: str, uri: str) -> dict:
        return await self.update_by_id(user_id, {"avatar": uri})
