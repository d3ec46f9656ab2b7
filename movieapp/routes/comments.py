"""
Comment Routes - API endpoints for movie comments
Reads are public, writes need a bearer token
"""

from fastapi import APIRouter, Depends, Path, Request, Response, status
from sqlalchemy.orm import Session
from typing import List

from movieapp.database import get_db
from movieapp.utils.dependencies import get_current_user
from movieapp.models.user import User
from movieapp.schemas.comment import CommentCreate, CommentUpdate, CommentResponse
from movieapp.services.comment_service import CommentService
from movieapp.services.movie_service import MovieService, get_movie_service

router = APIRouter(prefix="/api/comments", tags=["Comments"])


@router.get("/movie/{movie_id}", response_model=List[CommentResponse])
def get_comments_by_movie(
    movie_id: int = Path(..., description="TMDB movie ID"),
    db: Session = Depends(get_db)
):
    """Get all comments for a movie, newest first"""
    return CommentService.get_comments_by_movie(db, movie_id)


@router.get("/{comment_id}", response_model=CommentResponse)
def get_comment(
    comment_id: int = Path(..., description="Comment ID"),
    db: Session = Depends(get_db)
):
    """Get a single comment by ID"""
    return CommentService.get_comment(db, comment_id)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment_data: CommentCreate,
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    movies: MovieService = Depends(get_movie_service)
):
    """
    Post a comment on a movie

    - **movieId**: TMDB movie ID (must exist)
    - **content**: 3 to 1000 characters
    """
    comment = CommentService.add_comment(db, current_user, comment_data, movies)
    response.headers["Location"] = str(request.url_for("get_comment", comment_id=comment.id))
    return comment


@router.put("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_comment(
    comment_data: CommentUpdate,
    comment_id: int = Path(..., description="Comment ID"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Edit a comment

    Only the author can edit. If the body carries an `id` it must match the path.
    """
    CommentService.update_comment(db, current_user, comment_id, comment_data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int = Path(..., description="Comment ID"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a comment. Only the author can delete it."""
    CommentService.delete_comment(db, current_user, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
