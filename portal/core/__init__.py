"""Core utilities: exceptions, logging and caller permissions."""
