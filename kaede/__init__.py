"""Kaede comments API: anonymous threaded comments and likes for Ghost posts."""
