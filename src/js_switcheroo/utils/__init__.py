"""
Utilities Package.

Modules:
    - ``console``: Rich-backed logging helpers used by the CLI.
"""
