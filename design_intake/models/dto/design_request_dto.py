"""
Data Transfer Objects for design request submissions.
"""
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from design_intake.models.dto.upload_dto import UploadedFileResponse


class DesignRequest(BaseModel):
    """Request schema for a hire-a-designer submission."""
    name: str = Field(..., min_length=1, max_length=200, description="Customer full name")
    email: EmailStr
    phone_number: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    product_title: Optional[str] = None
    variant_title: Optional[str] = None
    design_description: str = Field(..., min_length=1, description="What the customer wants designed")
    contact_mode: Optional[str] = Field(default=None, description="Preferred contact method")
    design_style: Optional[str] = None
    colors: List[str] = Field(default_factory=list)
    inspiration_links: List[str] = Field(default_factory=list)
    uploaded_files: List[UploadedFileResponse] = Field(default_factory=list)

    @field_validator('name', 'design_description')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or v.strip() == "":
            raise ValueError("Field cannot be empty")
        return v.strip()

    @property
    def first_name(self) -> str:
        return self.name.split(' ')[0]

    @property
    def last_name(self) -> str:
        return ' '.join(self.name.split(' ')[1:])


class DesignRequestResponse(BaseModel):
    """Response schema for an accepted design request."""
    submission_id: str
    message: str
    files_uploaded: int
    file_urls: List[str]
