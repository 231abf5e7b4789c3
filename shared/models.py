from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any
from datetime import datetime

from models.enums import Theme

# Модели запросов API целей
class GoalCreateRequest(BaseModel):
    name: str = Field(..., max_length=200)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Название цели не может быть пустым')
        return v.strip()

class GoalRenameRequest(BaseModel):
    # пустое имя допустимо: оно откатывается к прежнему
    name: str = Field("", max_length=200)

class ThemeRequest(BaseModel):
    theme: Optional[Theme] = None  # None = переключить

# Модели авторизации
class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if '@' not in v:
            raise ValueError('Неверный email')
        return v.strip()

class PasswordResetRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    redirect_to: Optional[str] = None

class PasswordUpdateRequest(BaseModel):
    password: str = Field(..., min_length=6)

# Модели ответов
class APIResponse(BaseModel):
    success: bool
    message: str = ""
    data: Optional[Any] = None
    errors: Optional[List[str]] = None
    timestamp: datetime = Field(default_factory=datetime.now)

class UserInfo(BaseModel):
    id: str
    email: Optional[str] = None

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    store_backend: str
