# tasktimetracker/server/tags.py

from typing import List, Optional

from fastapi import APIRouter, Response, status

from tasktimetracker.models.booking import BookingTagAssignment
from tasktimetracker.models.tag import TagCreate, TagInDB
from .dependencies import ClientDep

router = APIRouter(prefix="/api", tags=["Tags"])


@router.get("/tags", response_model=List[TagInDB])
async def get_tags(client: ClientDep, id: Optional[int] = None, name: Optional[str] = None):
    return await client.booking_tags.search(tag_id=id, name=name)


@router.post("/tags", response_model=TagInDB, status_code=status.HTTP_201_CREATED)
async def post_tag(client: ClientDep, name: str):
    return await client.booking_tags.create(TagCreate(name=name))


@router.patch("/tags", response_model=TagInDB)
async def patch_tag(client: ClientDep, id: int, name: Optional[str] = None):
    if name is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return await client.booking_tags.rename(id, name)


@router.delete("/tags")
async def delete_tag(client: ClientDep, id: int):
    await client.booking_tags.delete(id)
    return Response(status_code=status.HTTP_200_OK)


# ――― tag assignments ――― #

@router.get("/tagassignments", response_model=List[BookingTagAssignment])
async def get_tagassignments(
    client: ClientDep,
    booking_id: Optional[int] = None,
    tag_id: Optional[int] = None,
):
    return await client.booking_tag_assignments.search(booking_id=booking_id, tag_id=tag_id)


@router.post("/tagassignments", response_model=BookingTagAssignment, status_code=status.HTTP_201_CREATED)
async def post_tagassignment(client: ClientDep, tag_id: int, booking_id: int):
    return await client.booking_tag_assignments.assign(booking_id=booking_id, tag_id=tag_id)


@router.delete("/tagassignments")
async def delete_tagassignment(client: ClientDep, tag_id: int, booking_id: int):
    await client.booking_tag_assignments.unassign(booking_id=booking_id, tag_id=tag_id)
    return Response(status_code=status.HTTP_200_OK)
