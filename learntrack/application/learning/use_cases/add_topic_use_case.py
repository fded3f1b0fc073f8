"""Use case for adding a topic from the add-topic form."""

from collections.abc import Mapping
from typing import Any

import structlog

from learntrack.application.common.clock import ClockProtocol
from learntrack.application.common.result import FieldErrors, Result, Success
from learntrack.application.common.validation import validate_form
from learntrack.application.learning.inputs import AddTopicForm
from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.domain.learning.entities.topic import Topic

logger = structlog.get_logger(__name__)


class AddTopicUseCase:
    """Validate the add-topic form, then add the topic."""

    def __init__(self, repository: LearningRepository, clock: ClockProtocol) -> None:
        """Initialize use case with dependencies."""
        self.repository = repository
        self.clock = clock

    def execute(self, form: Mapping[str, Any]) -> Result[Topic, FieldErrors]:
        """
        Add a topic if the form passes the field rules.

        Args:
            form: Raw form payload with name, category, priority,
                target_date and goal_hours

        Returns:
            Success with the created topic, or Failure with one message per
            invalid field. Nothing is stored on failure.
        """
        validated = validate_form(AddTopicForm, form, context={"today": self.clock.today()})
        if validated.is_failure:
            logger.info("topic_form_rejected", fields=sorted(validated.unwrap_error()))
            return validated

        return Success(self.repository.add_topic(validated.unwrap().to_input()))
