"""Task tracking service: a small CRUD API over a tasks table."""
