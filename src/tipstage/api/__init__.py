"""HTTP API routes for the preview server."""
