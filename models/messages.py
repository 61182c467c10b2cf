class ErrorMessage:
    """User-facing error strings shared by schemas, services and pages."""

    REQUIRED_EMAIL = "Email address is required."
    INVALID_EMAIL = "Enter a valid email address."
    TOO_LONG_EMAIL = "Email address must be 128 characters or fewer."

    REQUIRED_PASSWORD = "Password is required."
    INVALID_PASSWORD = "Enter a valid password."
    WEAK_PASSWORD = "Password must be at least 8 characters."
    TOO_LONG_PASSWORD = "Password must be 128 characters or fewer."

    REQUIRED_USER_NAME = "Name is required."
    INVALID_USER_NAME = "Enter a valid name."
    TOO_LONG_USER_NAME = "Name must be 128 characters or fewer."

    ALREADY_EXISTS_USER = "A user with this email or name already exists."
    UNAUTHORIZED = "Invalid email or password."
    FAILED_SIGN_IN = "Sign-in failed."
    FAILED_SIGN_UP = "Sign-up failed."
    FAILED_SIGN_OUT = "Sign-out failed."
    SERVER_ERROR = "A server error occurred. Please try again later."


class NotifyMessage:
    SIGN_IN_SUCCEEDED = "Signed in successfully."
    SIGN_UP_SUCCEEDED = "Account created successfully."
    SIGN_OUT_SUCCEEDED = "Signed out."
