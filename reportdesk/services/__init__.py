"""Report services: repository, lookup, session pointer, tracking."""
