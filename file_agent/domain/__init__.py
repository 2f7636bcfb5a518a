"""Pure domain utilities: token auth, base64 codec, directory walking, errors.

These modules are free of FastAPI/HTTP concerns so they can be unit-tested
and reused by both the server and the smoke runner.
"""
__all__ = ["auth", "codec", "errors", "walker"]
