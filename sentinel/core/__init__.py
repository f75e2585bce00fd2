"""Core check pipeline for API Sentinel."""
