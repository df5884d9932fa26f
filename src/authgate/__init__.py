"""Cookie-based JWT authentication backend."""
