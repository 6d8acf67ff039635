"""Application services (use cases) orchestrating units of work."""
