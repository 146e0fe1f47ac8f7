"""Storage, query and pipeline components."""
