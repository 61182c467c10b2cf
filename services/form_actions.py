"""
Form actions: validate one raw submission, call the auth service, and
return a FormReply. Every exception from the service is caught here.
"""

import logging
from typing import Any, Mapping
from models.auth import FormReply, SignInSchema, SignUpSchema
from models.messages import ErrorMessage
from services.auth_service import AuthService, AuthServiceError
from services.validation import parse_submission

logger = logging.getLogger(__name__)


async def sign_in_action(form_data: Mapping[str, Any], auth_service: AuthService) -> FormReply:
    submission = parse_submission(SignInSchema, form_data)

    if submission.status != "success":
        return submission.reply()

    try:
        logger.info("Sign-in attempt for email: %s", submission.value.email)
        await auth_service.sign_in(submission.value.email, submission.value.password)

        return submission.reply()
    except AuthServiceError as e:
        logger.warning("Sign-in rejected (%s)", e.code.value)
        return submission.reply(field_errors={"message": [e.message]})
    except Exception:
        logger.exception("Sign-in failed")
        return submission.reply(field_errors={"message": [ErrorMessage.SERVER_ERROR]})


async def sign_up_action(form_data: Mapping[str, Any], auth_service: AuthService) -> FormReply:
    submission = parse_submission(SignUpSchema, form_data)

    if submission.status != "success":
        return submission.reply()

    try:
        logger.info("Sign-up attempt for email: %s", submission.value.email)
        await auth_service.sign_up(
            submission.value.email,
            submission.value.name,
            submission.value.password,
        )

        return submission.reply()
    except AuthServiceError as e:
        logger.warning("Sign-up rejected (%s)", e.code.value)
        return submission.reply(field_errors={"message": [e.message]})
    except Exception:
        logger.exception("Sign-up failed")
        return submission.reply(field_errors={"message": [ErrorMessage.SERVER_ERROR]})
