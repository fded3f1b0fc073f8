"""Learning domain exceptions."""

from learntrack.domain.common.exceptions import BusinessRuleViolationError, EntityNotFoundError


class TopicNotFoundError(EntityNotFoundError):
    """Raised when a topic cannot be found in the current user's collection."""

    def __init__(self, topic_id: object) -> None:
        super().__init__("Topic", topic_id)


class NoTopicSelectedError(BusinessRuleViolationError):
    """Raised when a session is submitted without a topic."""

    def __init__(self) -> None:
        super().__init__("no_topic_selected", "No topic selected")


class DeadlinePassedError(BusinessRuleViolationError):
    """Raised when logging against a topic whose deadline has passed."""

    def __init__(self) -> None:
        super().__init__("deadline_passed", "Cannot log session - deadline has passed")


class InvalidDurationError(BusinessRuleViolationError):
    """Raised when the candidate duration is not a positive number of minutes."""

    def __init__(self, message: str = "Please enter a valid duration") -> None:
        super().__init__("invalid_duration", message)


class GoalExceededError(BusinessRuleViolationError):
    """
    Raised when a session would push the topic past its goal.

    Carries the figures a form needs to tell the user how much is left.
    """

    def __init__(self, past_minutes: int, goal_minutes: float, remaining_minutes: float) -> None:
        self.past_minutes = past_minutes
        self.goal_minutes = goal_minutes
        self.remaining_minutes = remaining_minutes
        message = (
            f"You've already logged {past_minutes} minutes ({past_minutes / 60:.1f} hours).\n"
            f"Goal: {_format_number(goal_minutes)} minutes "
            f"({_format_number(goal_minutes / 60)} hours).\n"
            f"You can log up to {_format_number(remaining_minutes)} more minutes."
        )
        super().__init__("goal_exceeded", message)
        self.details.update(
            {
                "past_minutes": past_minutes,
                "goal_minutes": goal_minutes,
                "remaining_minutes": remaining_minutes,
            }
        )


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
