"""Domain services. Each takes a :class:`skillswap.repositories.Store`."""
