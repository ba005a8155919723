"""SQLAdmin back-office for browsing and fixing dictionary content."""

from __future__ import annotations

import hmac
import logging

from fastapi import Request
from markupsafe import Markup
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend

from wordquiz.core.config import settings
from wordquiz.models.category_model import Category
from wordquiz.models.vocabulary_item_model import MAX_DIFFICULTY_LEVEL, VocabularyItem

logger = logging.getLogger(__name__)


class AdminAuth(AuthenticationBackend):
    """Single operator login taken from ``ADMIN_USERNAME`` / ``ADMIN_PASSWORD``."""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username") or "")
        password = str(form.get("password") or "")

        if not settings.ADMIN_PASSWORD:
            logger.warning("Admin login refused: ADMIN_PASSWORD is not configured.")
            return False

        valid_user = hmac.compare_digest(username.encode(), settings.ADMIN_USERNAME.encode())
        valid_password = hmac.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
        if valid_user and valid_password:
            request.session.update({"token": "admin_logged_in", "user": username})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return "token" in request.session


def _difficulty_badge(model: VocabularyItem, _attribute: str) -> Markup:
    level = model.difficulty_level or 0
    filled = "●" * level + "○" * (MAX_DIFFICULTY_LEVEL - level)
    return Markup(f"<span title='level {level}'>{filled}</span>")


class VocabularyItemAdmin(ModelView, model=VocabularyItem):
    name = "Word"
    name_plural = "Words"
    icon = "fa-solid fa-language"
    category = "Dictionary"
    column_list = [
        VocabularyItem.id,
        VocabularyItem.original,
        VocabularyItem.translation,
        VocabularyItem.category,
        VocabularyItem.difficulty_level,
        VocabularyItem.correct_count,
        VocabularyItem.wrong_count,
        VocabularyItem.last_reviewed_at,
        VocabularyItem.is_custom,
    ]
    column_searchable_list = [VocabularyItem.original, VocabularyItem.translation]
    column_sortable_list = [
        VocabularyItem.original,
        VocabularyItem.category,
        VocabularyItem.difficulty_level,
        VocabularyItem.last_reviewed_at,
    ]
    column_formatters = {VocabularyItem.difficulty_level: _difficulty_badge}
    # Answer history is only written by the quiz; deletion goes through the API policy.
    form_excluded_columns = [
        VocabularyItem.created_at,
        VocabularyItem.correct_count,
        VocabularyItem.wrong_count,
        VocabularyItem.last_reviewed_at,
        VocabularyItem.is_custom,
    ]
    can_delete = False
    can_export = True


class CategoryAdmin(ModelView, model=Category):
    name = "Category"
    name_plural = "Categories"
    icon = "fa-solid fa-tags"
    category = "Dictionary"
    column_list = [Category.name, Category.icon, Category.color]
    column_searchable_list = [Category.name]


def mount_admin(app, engine) -> Admin:
    admin = Admin(
        app,
        engine,
        authentication_backend=AdminAuth(secret_key=settings.SECRET_KEY),
        base_url="/admin",
        title="Wordquiz admin",
    )
    admin.add_view(VocabularyItemAdmin)
    admin.add_view(CategoryAdmin)
    return admin
