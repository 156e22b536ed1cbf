"""tasktimer domain models: tasks, dialogs, presets and settings."""
