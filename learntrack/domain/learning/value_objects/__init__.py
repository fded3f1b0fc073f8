from .topic_attributes import Category, Priority

__all__ = ["Category", "Priority"]
