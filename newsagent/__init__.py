"""Newsletter drafting agent."""
