"""
Domain error kinds.

Every failed precondition surfaces as its own subclass so the presentation
layer can tell the user exactly what went wrong. None of them are retried
by the service; the caller decides.
"""

from typing import Optional

from fastapi import status


class SkillSwapError(Exception):
    """Base class for all client-correctable domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "skillswap_error"
    default_message: str = "Request could not be completed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class NotFound(SkillSwapError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found."


class Forbidden(SkillSwapError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "You are not allowed to perform this action."


class InvalidTransition(SkillSwapError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    default_message = "Swap request is no longer pending."


class InvalidParticipants(SkillSwapError):
    code = "invalid_participants"
    default_message = "Cannot create a swap request with yourself."


class UnknownSkill(SkillSwapError):
    code = "unknown_skill"
    default_message = "Skill does not exist in the catalog."


class SkillNotOffered(SkillSwapError):
    code = "skill_not_offered"
    default_message = "Skill is not offered by that user."


class DuplicateSwapRequest(SkillSwapError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_swap_request"
    default_message = "An identical pending swap request already exists."


class NoChannel(SkillSwapError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "no_channel"
    default_message = "No conversation exists between these users."


class InvalidMessage(SkillSwapError):
    code = "invalid_message"
    default_message = "A message needs text or an image."


class RatingNotAllowed(SkillSwapError):
    status_code = status.HTTP_409_CONFLICT
    code = "rating_not_allowed"
    default_message = "This swap cannot be rated."


class EmailTaken(SkillSwapError):
    status_code = status.HTTP_409_CONFLICT
    code = "email_taken"
    default_message = "An account with this email already exists."


class InvalidAvailability(SkillSwapError):
    code = "invalid_availability"
    default_message = "Availability slot is not valid."


class AccountBanned(SkillSwapError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "account_banned"
    default_message = "This account has been banned."


# ── Storage signals (not client errors) ──

class DuplicateEntry(Exception):
    """A unique constraint rejected an insert; a concurrent writer got there first."""
