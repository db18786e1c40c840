"""Database layer: schema, sessions and repository queries."""
