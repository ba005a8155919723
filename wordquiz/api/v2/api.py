from fastapi import APIRouter

from .endpoints import dictionary_router, quiz_router, vocabulary_router

api_router = APIRouter()

api_router.include_router(quiz_router.router, prefix="/quiz", tags=["Quiz"])
api_router.include_router(vocabulary_router.router, prefix="/vocabulary", tags=["Vocabulary"])
api_router.include_router(vocabulary_router.category_router, prefix="/categories", tags=["Vocabulary"])
api_router.include_router(dictionary_router.router, prefix="/dictionary", tags=["Dictionary"])
