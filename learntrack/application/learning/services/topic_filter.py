"""Visible topic subset for the topics page."""

from collections.abc import Iterable
from dataclasses import dataclass

from learntrack.domain.learning.entities.topic import Topic

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class TopicFilter:
    """
    Category filter combined with a case-insensitive name search.

    category is either "all" or one of the Category values. A topic is
    visible when it matches both the category and the search query.
    """

    category: str = ALL_CATEGORIES
    search_query: str = ""

    def matches(self, topic: Topic) -> bool:
        if self.category != ALL_CATEGORIES and topic.category != self.category:
            return False
        return topic.matches_name(self.search_query)

    def apply(self, topics: Iterable[Topic]) -> list[Topic]:
        """Filter topics, keeping their order."""
        return [topic for topic in topics if self.matches(topic)]

    def with_category(self, category: str) -> "TopicFilter":
        return TopicFilter(category=category, search_query=self.search_query)

    def with_search(self, search_query: str) -> "TopicFilter":
        return TopicFilter(category=self.category, search_query=search_query)
