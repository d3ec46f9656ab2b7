"""
Comment Service - persistence and ownership rules for movie comments
"""

from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
from typing import List
from datetime import datetime, timezone
import logging

from movieapp.models.comment import Comment
from movieapp.models.user import User
from movieapp.schemas.comment import CommentCreate, CommentUpdate
from movieapp.services.movie_service import MovieService

logger = logging.getLogger(__name__)


class CommentService:
    """Service for movie comment operations"""

    @staticmethod
    def _get_or_404(db: Session, comment_id: int) -> Comment:
        comment = db.query(Comment).options(
            joinedload(Comment.user)
        ).filter(
            Comment.id == comment_id
        ).first()

        if not comment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
        return comment

    @staticmethod
    def _ensure_author(comment: Comment, user: User) -> None:
        if comment.user_id != user.id:
            logger.warning(f"User {user.id} attempted to modify comment {comment.id} owned by {comment.user_id}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only modify your own comments"
            )

    @staticmethod
    def get_comments_by_movie(db: Session, movie_id: int) -> List[Comment]:
        """All comments on a movie, newest first"""
        return db.query(Comment).options(
            joinedload(Comment.user)
        ).filter(
            Comment.movie_id == movie_id
        ).order_by(
            Comment.created_at.desc(),
            Comment.id.desc()
        ).all()

    @staticmethod
    def get_comment(db: Session, comment_id: int) -> Comment:
        return CommentService._get_or_404(db, comment_id)

    @staticmethod
    def add_comment(
        db: Session,
        user: User,
        comment_data: CommentCreate,
        movies: MovieService
    ) -> Comment:
        """
        Post a comment on a movie.

        The movie must exist at TMDB; anything else is rejected with 400.
        """
        try:
            movies.get_movie_details(comment_data.movie_id)
        except HTTPException as e:
            if e.status_code == status.HTTP_404_NOT_FOUND:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid movie ID")
            raise

        comment = Comment(
            content=comment_data.content,
            movie_id=comment_data.movie_id,
            user_id=user.id,
            created_at=datetime.now(timezone.utc)
        )
        db.add(comment)
        db.commit()

        logger.info(f"User {user.id} commented on movie {comment.movie_id}")
        # Reload with author for the response
        return CommentService._get_or_404(db, comment.id)

    @staticmethod
    def update_comment(
        db: Session,
        user: User,
        comment_id: int,
        comment_data: CommentUpdate
    ) -> Comment:
        if comment_data.id is not None and comment_data.id != comment_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment ID mismatch")

        comment = CommentService._get_or_404(db, comment_id)
        CommentService._ensure_author(comment, user)

        comment.content = comment_data.content
        comment.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def delete_comment(db: Session, user: User, comment_id: int) -> None:
        comment = CommentService._get_or_404(db, comment_id)
        CommentService._ensure_author(comment, user)

        db.delete(comment)
        db.commit()
