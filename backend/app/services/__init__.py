"""Application services implementing the social interaction rules."""
