from pydantic import EmailStr, Field

from app.core.schemas import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterResponse(CamelModel):
    user_id: str
    email: str
    message: str


class SupabaseCredentialsResponse(CamelModel):
    supabase_url: str
    supabase_anon_key: str
