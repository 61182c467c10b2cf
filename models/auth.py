from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic_core import PydanticCustomError
from email_validator import EmailNotValidError, validate_email
from typing import Annotated, Literal
from models.messages import ErrorMessage

MAX_FIELD_LENGTH = 128
MIN_PASSWORD_LENGTH = 8


def _check_email_format(value: str) -> str:
    # Only the format is checked; the submitted value is kept as typed.
    # test_environment lets *.test domains through; dotless hosts are still rejected.
    try:
        validated = validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError as e:
        raise PydanticCustomError(
            "invalid_email",
            "value is not a valid email address: {reason}",
            {"reason": str(e)},
        )
    if "." not in validated.ascii_domain:
        raise PydanticCustomError(
            "invalid_email",
            "value is not a valid email address: {reason}",
            {"reason": "The domain name must contain a period."},
        )
    return value


Email = Annotated[
    str,
    Field(max_length=MAX_FIELD_LENGTH, json_schema_extra={"input_type": "email"}),
    AfterValidator(_check_email_format),
]
Password = Annotated[
    str,
    Field(
        min_length=MIN_PASSWORD_LENGTH,
        max_length=MAX_FIELD_LENGTH,
        json_schema_extra={"input_type": "password"},
    ),
]
UserName = Annotated[str, Field(min_length=1, max_length=MAX_FIELD_LENGTH)]


class SignInSchema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    email: Email
    password: Password


class SignUpSchema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    email: Email
    password: Password
    name: UserName


# pydantic error type -> message, per field. "default" covers anything else
# (wrong type, malformed value).
FIELD_ERROR_MESSAGES: dict[str, dict[str, str]] = {
    "email": {
        "missing": ErrorMessage.REQUIRED_EMAIL,
        "string_too_long": ErrorMessage.TOO_LONG_EMAIL,
        "default": ErrorMessage.INVALID_EMAIL,
    },
    "password": {
        "missing": ErrorMessage.REQUIRED_PASSWORD,
        "string_too_short": ErrorMessage.WEAK_PASSWORD,
        "string_too_long": ErrorMessage.TOO_LONG_PASSWORD,
        "default": ErrorMessage.INVALID_PASSWORD,
    },
    "name": {
        "missing": ErrorMessage.REQUIRED_USER_NAME,
        "string_too_short": ErrorMessage.REQUIRED_USER_NAME,
        "string_too_long": ErrorMessage.TOO_LONG_USER_NAME,
        "default": ErrorMessage.INVALID_USER_NAME,
    },
}


class FormReply(BaseModel):
    """Outcome of a form action. Serialised as {status, fieldErrors}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: Literal["success", "error"]
    field_errors: dict[str, list[str]] | None = Field(default=None, alias="fieldErrors")

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def first_error(self) -> str | None:
        """The message to show in a notification: `message` first, then any field."""
        if not self.field_errors:
            return None
        if self.field_errors.get("message"):
            return self.field_errors["message"][0]
        for messages in self.field_errors.values():
            if messages:
                return messages[0]
        return None


class SessionUser(BaseModel):
    id: str
    email: str
    name: str | None = None


class Session(BaseModel):
    user: SessionUser
    access_token: str
    expires_at: int | None = None


class SessionResponse(BaseModel):
    user: SessionUser
    expires_at: int | None = None
