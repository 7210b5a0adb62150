from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from esnaf_defterim.models.user import UserRole
from esnaf_defterim.schemas.user import UserOut

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=5, max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("password", "sifre"),
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class LoginData(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("current_password", "currentPassword", "mevcutSifre"),
    )
    new_password: str = Field(
        min_length=6,
        max_length=128,
        validation_alias=AliasChoices("new_password", "newPassword", "yeniSifre"),
    )


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2, max_length=120, validation_alias=AliasChoices("name", "isim"))
    email: str = Field(min_length=5, max_length=320, pattern=EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=32, validation_alias=AliasChoices("phone", "telefon"))
    password: str = Field(min_length=6, max_length=128, validation_alias=AliasChoices("password", "sifre"))
    role: UserRole = Field(default=UserRole.REGULAR, validation_alias=AliasChoices("role", "rol"))

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        if not isinstance(value, str):
            return value
        normalized = value.strip().lower()
        # Role names used by the older clients.
        legacy = {"kasiyer": "clerk", "kullanici": "regular"}
        return legacy.get(normalized, normalized)
