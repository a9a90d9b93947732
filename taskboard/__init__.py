"""Taskboard: task management API with group assignment and completion notifications."""

__version__ = "1.0.0"
