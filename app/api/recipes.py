# api/recipes.py
# Handles all API endpoints related to recipes.
# Every endpoint is scoped to the authenticated user.

import logging
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

# Import local modules
from app import crud
from app import schemas
from app.api.deps import get_current_user_id, get_db

# Create an API router
router = APIRouter(dependencies=[Depends(get_current_user_id)])

# Get a logger instance
logger = logging.getLogger(__name__)

NOT_FOUND = {404: {"model": schemas.ErrorResponse, "description": "Recipe not found"}}
FORBIDDEN = {403: {"model": schemas.ErrorResponse, "description": "Not the owner of the recipe"}}


@router.post("", response_model=schemas.Created)
def create_recipe(
        recipe: schemas.RecipeCreate,
        db: Session = Depends(get_db),
        user_id: UUID = Depends(get_current_user_id),
):
    """
    Create a new recipe for the currently authenticated user.
    """
    logger.debug(f"User {user_id} is creating a new recipe.")
    db_recipe = crud.create_user_recipe(db=db, recipe=recipe, user_id=user_id)
    return {"message": "Recipe added!", "id": db_recipe.id}


@router.get("", response_model=List[schemas.Recipe])
def read_recipes(
        db: Session = Depends(get_db),
        user_id: UUID = Depends(get_current_user_id),
):
    """
    Retrieve the recipes owned by the current user.
    """
    return crud.get_recipes_by_owner(db, owner_id=user_id)


@router.get("/{recipe_id}", response_model=schemas.Recipe, responses={**NOT_FOUND, **FORBIDDEN})
def read_recipe(
        recipe_id: UUID,
        db: Session = Depends(get_db),
        user_id: UUID = Depends(get_current_user_id),
):
    """
    Retrieve a single recipe by its ID.
    """
    return crud.get_recipe(db, recipe_id=recipe_id, requester_id=user_id)


@router.put("/{recipe_id}", response_model=schemas.Message, responses={**NOT_FOUND, **FORBIDDEN})
def update_recipe(
        recipe_id: UUID,
        recipe: schemas.RecipeUpdate,
        db: Session = Depends(get_db),
        user_id: UUID = Depends(get_current_user_id),
):
    """
    Update a recipe. Only the owner of the recipe can perform this action.
    """
    logger.debug(f"User {user_id} is updating recipe with ID: {recipe_id}")
    crud.update_recipe(db=db, recipe_id=recipe_id, recipe_update=recipe, requester_id=user_id)
    return {"message": "Recipe updated!"}


@router.delete("/{recipe_id}", response_model=schemas.Message, responses={**NOT_FOUND, **FORBIDDEN})
def delete_recipe(
        recipe_id: UUID,
        db: Session = Depends(get_db),
        user_id: UUID = Depends(get_current_user_id),
):
    """
    Delete a recipe. Only the owner of the recipe can perform this action.
    """
    logger.debug(f"User {user_id} is deleting recipe with ID: {recipe_id}")
    crud.delete_recipe(db=db, recipe_id=recipe_id, requester_id=user_id)
    return {"message": "Recipe deleted!"}
