from models.subject import Subject
from models.lesson import Lesson
from models.record import LessonRecord, SubjectJoin
from models.schedule import ResolvedSchedule, ScheduledLesson

__all__ = [
    "Subject",
    "Lesson",
    "LessonRecord",
    "SubjectJoin",
    "ResolvedSchedule",
    "ScheduledLesson",
]
