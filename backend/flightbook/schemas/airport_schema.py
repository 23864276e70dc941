from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

class AirportBase(BaseModel):
    code: str = Field(..., min_length=3, max_length=3, description="IATA Airport Code, 3 chars uppercase.")
    name: str = Field(..., min_length=1, max_length=150)
    city: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)

    @field_validator("code")
    def normalize_code(cls, v):
        v = v.strip().upper()
        if not v.isalpha():
            raise ValueError("IATA code must be exactly 3 letters.")
        return v

class AirportCreate(AirportBase):
    pass

class AirportUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=3, max_length=3)
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("code")
    def normalize_code(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        if not v.isalpha():
            raise ValueError("IATA code must be exactly 3 letters.")
        return v

class AirportResponse(AirportBase):
    airport_id: int

    model_config = ConfigDict(from_attributes=True)

class AirportSummary(BaseModel):
    """Compact airport shape nested inside flight payloads."""
    airport_id: int
    name: str
    code: str

    model_config = ConfigDict(from_attributes=True)
