"""Application state objects bound by the UI."""
