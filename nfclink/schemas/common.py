# nfclink/schemas/common.py
from pydantic import BaseModel, ConfigDict


class RequestModel(BaseModel):
    """Request bodies accept both the camelCase wire names and field names."""
    model_config = ConfigDict(populate_by_name=True)


class ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
