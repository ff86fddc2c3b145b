"""Comment system module.

Provides anonymous two-level threaded comments with:
- Thread/reply identity assignment
- Password-protected deletion (salted PBKDF2 credentials)
- Tombstoning of roots that still have replies, cascade removal

Note: Router is not exported here to avoid circular imports.
Import directly from kaede.comments.router when needed.
"""

from .models import COMMENTS_TABLES_CQL, Comment
from .service import CommentService


__all__ = [
    "COMMENTS_TABLES_CQL",
    "Comment",
    "CommentService",
]
