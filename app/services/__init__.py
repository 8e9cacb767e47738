"""Services orchestrating policy, quota, repositories and audit per operation."""
