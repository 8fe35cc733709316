"""
Plain-dict serialisers shared by the services.

Services return dicts rather than ORM instances so results can be cached
as JSON and handed straight to the response models.
"""
from blog.models import Article, Comment, User


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def user_to_dict(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "created_at": _iso(user.created_at),
        "updated_at": _iso(user.updated_at),
    }


def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "article_id": comment.article_id,
        "commenter": comment.commenter,
        "body": comment.body,
        "created_at": _iso(comment.created_at),
    }


def article_to_dict(article: Article, with_author: bool = True) -> dict:
    """List view: no comments.  ``with_author=False`` when nested under a user."""
    return {
        "id": article.id,
        "title": article.title,
        "body": article.body,
        "user_id": article.user_id,
        "created_at": _iso(article.created_at),
        "updated_at": _iso(article.updated_at),
        "author": user_to_dict(article.author) if with_author else None,
    }


def article_detail_to_dict(article: Article) -> dict:
    data = article_to_dict(article)
    data["comments"] = [comment_to_dict(c) for c in article.comments]
    return data
