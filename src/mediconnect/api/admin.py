"""Admin user management routes."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from mediconnect.api.deps import AdminData, AdminOnly
from mediconnect.models.records import UserCreate, UserRecord, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get("", response_model=list[UserRecord])
async def list_users(identity: AdminOnly, admin: AdminData) -> list[UserRecord]:
    return await admin.list_users()


@router.post("", response_model=UserRecord, status_code=status.HTTP_201_CREATED)
async def add_user(user: UserCreate, identity: AdminOnly, admin: AdminData) -> UserRecord:
    """Add a user profile.

    Raises:
        HTTPException: 400 if name or role is missing, 502 if the insert failed
    """
    created = await admin.add_user(user)
    if created is None:
        missing = user.missing_fields()
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Missing required fields: {', '.join(missing)}",
            )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to add user",
        )
    logger.info(f"Admin {identity.id} added user {created.id}")
    return created


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    changes: UserUpdate,
    identity: AdminOnly,
    admin: AdminData,
) -> dict[str, bool]:
    if not await admin.update_user(user_id, changes):
        if not changes.model_dump(exclude_none=True):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields to update",
            )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to update user",
        )
    return {"updated": True}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, identity: AdminOnly, admin: AdminData) -> Response:
    if not await admin.delete_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to delete user",
        )
    logger.info(f"Admin {identity.id} deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
