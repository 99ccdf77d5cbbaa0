"""Taskboard: personal task management service."""
