"""Front ends that drive the task list service."""
