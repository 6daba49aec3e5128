from pydantic import BaseModel, Field
from datetime import datetime, time


class OpeningHourBase(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)
    open_time: time
    close_time: time
    slot_index: int = Field(0, ge=0)


class OpeningHourCreate(OpeningHourBase):
    pass


# Day is fixed once created; only the slot changes
class OpeningHourUpdate(BaseModel):
    open_time: time
    close_time: time
    slot_index: int = Field(0, ge=0)


class OpeningHourRead(OpeningHourBase):
    id: str
    tenant_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
