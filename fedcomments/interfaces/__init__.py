"""Public interface definitions for backing stores.

    Interface        →  Concrete implementation (in fedcomments/providers/)
    ─────────────────────────────────────────────────────────────────────
    ICommentStore    →  SQLiteCommentStore
"""

from fedcomments.interfaces.comment_store import ICommentStore

__all__ = ["ICommentStore"]
