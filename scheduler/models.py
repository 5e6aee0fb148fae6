# Models live in scheduler.data; Django discovers them through this module.
from .data.models import Card, Lesson, ReviewLog, StudySession, Subject, UserProgress

__all__ = ["Card", "Lesson", "ReviewLog", "StudySession", "Subject", "UserProgress"]
