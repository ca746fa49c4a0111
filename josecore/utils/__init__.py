"""Internal helpers for the JSON and base64url collaborators."""
