"""LifeStream calendar backend: events, reminders and notification history."""
