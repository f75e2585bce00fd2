"""HTTP routers for API Sentinel."""
