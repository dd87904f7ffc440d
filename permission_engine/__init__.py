"""Dynamic permission and authorization engine."""
