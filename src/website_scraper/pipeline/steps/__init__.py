"""Pipeline step implementations."""

from .convert import ConvertStep
from .fetch import FetchStep
from .save import SaveStep

__all__ = [
    "ConvertStep",
    "FetchStep",
    "SaveStep",
]
