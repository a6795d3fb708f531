# This project was developed with assistance from AI tools.
"""Shared data scope filtering for service queries.

Centralizes the DataScope -> SQL WHERE logic so that every dossier query
applies the same rules.
"""

from db import Dossier
from sqlalchemy import false

from ..schemas.auth import DataScope


def apply_data_scope(stmt, scope: DataScope):
    """Apply data scope filtering to a SQLAlchemy select over Dossier.

    Args:
        stmt: A SQLAlchemy select statement.
        scope: The caller's DataScope.

    Returns:
        The filtered statement.
    """
    if scope.full_pipeline:
        return stmt
    if scope.own_data_only and scope.user_id:
        return stmt.where(Dossier.user_id == scope.user_id)
    # an empty scope grants nothing
    return stmt.where(false())
