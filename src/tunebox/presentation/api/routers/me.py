"""Router for the authenticated identity."""

from fastapi import APIRouter

from tunebox.presentation.api.dependencies import CurrentIdentity
from tunebox.presentation.api.schemas.auth import IdentityClaimsResponse, MeResponse

router = APIRouter()


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user data"},
        401: {"description": "Not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
async def get_me(identity: CurrentIdentity) -> MeResponse:
    """
    Get the current user's live identity record.

    Requires a valid access token in the Authorization header.
    """
    return MeResponse(
        user=IdentityClaimsResponse(
            sub=identity.id,
            email=identity.email,
            username=identity.username,
        ),
    )
