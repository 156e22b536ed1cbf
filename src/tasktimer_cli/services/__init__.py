"""Services: the task store, the board controller and configuration."""
