"""Infrastructure Layer — database sessions, SQL repositories, logging setup."""
