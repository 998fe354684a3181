"""Git branch recycle bin.

Features:
- List all local branches with their remote sync status
- Soft delete branches by moving them into a recycle bin namespace
- Warn about unpushed or local-only branches before deleting
- Permanently purge the recycle bin
"""

__version__ = "0.1.0"
