"""Domain contexts: each one owns the queries and mutations of one entity family."""
