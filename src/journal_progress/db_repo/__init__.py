from .base import BaseDatabase
from .users import UserMixin
from .entries import EntryMixin
from .progress import ProgressMixin
from .messages import MessageMixin

__all__ = [
    "BaseDatabase",
    "UserMixin",
    "EntryMixin",
    "ProgressMixin",
    "MessageMixin",
]
