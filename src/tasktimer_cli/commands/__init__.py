"""Command modules for tasktimer."""
