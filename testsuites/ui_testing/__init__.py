"""UI automation: framework, page objects and browser specs."""
