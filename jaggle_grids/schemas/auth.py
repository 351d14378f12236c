from pydantic import BaseModel, Field, field_validator
import email_validator
from jaggle_grids.schemas.user import UserResponse

# Logins are mocked, so private-network addresses (dev@corp.local, a@box.localhost) are fine
email_validator.SPECIAL_USE_DOMAIN_NAMES[:] = []

class LoginRequest(BaseModel):
    email: str
    name: str = Field(..., min_length=1)

    @field_validator('email')
    def validate_email_syntax(cls, v):
        """Check address syntax but keep the caller's spelling as the identity key"""
        try:
            email_validator.validate_email(
                v,
                check_deliverability=False,
                globally_deliverable=False,
                test_environment=True
            )
        except email_validator.EmailNotValidError as e:
            raise ValueError(str(e))
        return v

class AuthResponse(BaseModel):
    token: str
    user: UserResponse

class MessageResponse(BaseModel):
    message: str
