"""Student group routes."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from campus_dashboard.core.dependencies import CurrentUser, GroupManagerDep
from campus_dashboard.core.exceptions import BookingError
from campus_dashboard.models.group import GroupModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.group import CreateGroupRequest, Group, UpdateGroupRequest
from campus_dashboard.utils.converters import model_to_group
from campus_dashboard.utils.group_manager import is_member

router = APIRouter(prefix="/api/groups", tags=["Groups"])


def _check_can_edit(model: GroupModel, user: UserModel) -> None:
    if user.role in ("professor", "admin") or is_member(model, user.id):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Only group members can change this group",
    )


@router.get("", response_model=List[Group], summary="List groups")
def list_groups(
    groups: GroupManagerDep,
    user: CurrentUser,
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    mine: bool = False,
) -> List[Group]:
    models = groups.list_groups(course_id=course_id, member_id=user.id if mine else None)
    return [model_to_group(m) for m in models]


@router.post(
    "",
    response_model=Group,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
)
def create_group(req: CreateGroupRequest, groups: GroupManagerDep, user: CurrentUser) -> Group:
    """Create a group; the creator becomes its first member."""
    model = groups.create_group(
        course_id=req.course_id,
        name=req.name,
        creator=user,
        description=req.description,
        max_members=req.max_members,
    )
    return model_to_group(model)


@router.get("/{group_id}", response_model=Group, summary="Get a group")
def get_group(group_id: int, groups: GroupManagerDep, user: CurrentUser) -> Group:
    return model_to_group(groups.get_group(group_id))


@router.put("/{group_id}", response_model=Group, summary="Update a group")
def update_group(
    group_id: int,
    req: UpdateGroupRequest,
    groups: GroupManagerDep,
    user: CurrentUser,
) -> Group:
    """Update a group (members, professors and admins).

    ``members`` replaces the whole member list when given; ``maxMembers: null``
    removes the member limit.
    """
    _check_can_edit(groups.get_group(group_id), user)
    changes = req.model_dump(exclude_unset=True)
    member_ids = changes.pop("members", None)
    model = groups.update_group(group_id, member_ids=member_ids, **changes)
    return model_to_group(model)


@router.delete("/{group_id}", response_model=ApiSuccess, summary="Delete a group")
def delete_group(group_id: int, groups: GroupManagerDep, user: CurrentUser) -> ApiSuccess:
    _check_can_edit(groups.get_group(group_id), user)
    groups.delete_group(group_id)
    return ApiSuccess()


@router.post("/{group_id}/join", response_model=Group, summary="Join a group")
def join_group(group_id: int, groups: GroupManagerDep, user: CurrentUser) -> Group:
    """Join a group.

    Raises:
        HTTPException: 400 if already a member or the group is full.
    """
    try:
        model = groups.join_group(group_id, user)
    except BookingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return model_to_group(model)


@router.post("/{group_id}/leave", response_model=Group, summary="Leave a group")
def leave_group(group_id: int, groups: GroupManagerDep, user: CurrentUser) -> Group:
    return model_to_group(groups.leave_group(group_id, user))
