"""HTTP surface for repochat."""
