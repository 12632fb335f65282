"""FastAPI dependencies for submissions."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import SubmissionService


async def get_submission_service(request: Request) -> SubmissionService:
    """Get submission service from app state."""
    service = getattr(request.app.state, "submission_service", None)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Submission service not available",
        )
    return service


SubmissionServiceDep = Annotated[SubmissionService, Depends(get_submission_service)]
