"""
Design request API routes.
"""
from fastapi import APIRouter, Depends, status
from design_intake.core.dependencies import get_design_request_service
from design_intake.models.dto.design_request_dto import DesignRequest, DesignRequestResponse
from design_intake.services.design_request_service import DesignRequestService

router = APIRouter(prefix="/v1/api", tags=["Design Requests"])


@router.post("/design-requests", response_model=DesignRequestResponse, status_code=status.HTTP_201_CREATED)
def submit_design_request(
    request: DesignRequest,
    design_request_service: DesignRequestService = Depends(get_design_request_service)
):
    """
    Submit a hire-a-designer request together with its uploaded file URLs.
    """
    return design_request_service.submit(request)
