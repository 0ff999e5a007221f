"""Desktop entrypoints for the NPU tab monitor."""
