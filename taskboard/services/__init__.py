"""Domain services: filtering, scheduling and reminders."""
