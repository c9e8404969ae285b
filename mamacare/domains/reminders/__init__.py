"""
Reminders Domain

Background jobs that detect due reminders (appointments, medication doses,
pregnancy milestones, checkups) and deliver them as push notifications.
"""
