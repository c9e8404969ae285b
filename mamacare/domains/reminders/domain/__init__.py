"""Reminder domain: entities, value objects and pure scheduling rules."""
