# blogapi/models/__init__.py
from .user import User
from .post import Post
from .comment import Comment
from .review import Review, review_document_id
from .donation import Donation

__all__ = ['User', 'Post', 'Comment', 'Review', 'review_document_id', 'Donation']
