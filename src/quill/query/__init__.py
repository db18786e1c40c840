"""Query construction: sort resolution, search predicates, statement composition."""
