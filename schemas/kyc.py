# schemas/kyc.py
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class KycUpload(BaseModel):
     """A new version of one KYC document for an owner or tenant."""
     doc_type: str = Field(..., min_length=1, max_length=50)
     file_data: str = Field(..., min_length=1, description="Opaque document blob (e.g. a data URL)")
     file_name: Optional[str] = Field(None, max_length=255)
     remarks: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "doc_type": "aadhar",
                    "file_data": "data:application/pdf;base64,JVBERi0xLjQK...",
                    "file_name": "aadhar.pdf",
                    "remarks": "Front and back"
               }
          }
     )
