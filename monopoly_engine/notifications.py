"""
Human-readable message log and transient toast notifications.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    """A short-lived notification for the UI."""

    toast_id: int
    message: str
    toast_type: ToastType


def push_message(messages: List[str], message: str, limit: int) -> None:
    """Prepend a message (newest first) and drop the oldest beyond ``limit``."""
    messages.insert(0, message)
    del messages[limit:]


def push_toast(toasts: List[Toast], toast: Toast, limit: int) -> None:
    """Append a toast and keep only the ``limit`` most recent ones."""
    toasts.append(toast)
    if len(toasts) > limit:
        del toasts[:-limit]
