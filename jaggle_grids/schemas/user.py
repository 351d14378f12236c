from pydantic import BaseModel
from datetime import datetime

class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    avatar_url: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
