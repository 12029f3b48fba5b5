"""
Attachment Endpoints.

Attachments are created and listed under their prompt response; deletion
is addressed by attachment id and also removes the stored file.
"""

from fastapi import APIRouter, Response, status

from telloom.server.services import prompt_responses as response_service
from telloom.server.services.deps import CurrentProfileDep, ReposDep, StorageClientDep

router = APIRouter()


@router.delete(
    "/{attachment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Attachment",
    description="Delete an attachment and its stored file.",
    responses={403: {"description": "Caller does not manage the sharer"}, 404: {"description": "Attachment not found"}},
)
async def delete_attachment(
    attachment_id: str, profile: CurrentProfileDep, repos: ReposDep, storage: StorageClientDep
) -> Response:
    await response_service.delete_attachment(repos, storage, profile, attachment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
