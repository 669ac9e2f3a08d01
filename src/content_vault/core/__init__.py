"""Core business logic modules for the content vault.

This package contains the main business logic organized by workflow step:
- delivery: Remote content API client
- sync: Delta-sync cycle and transactional apply
"""

__all__: list[str] = []
