"""
Core utilities shared across the trailsocial backend.

This package hosts:
- configuration helpers (env vars, listing defaults)
- logging setup
- the error taxonomy reported by repositories and services
- the credential codec (salt/hash derivation and verification)
"""
