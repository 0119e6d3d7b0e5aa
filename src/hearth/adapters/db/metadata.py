"""The `MetaData` shared by every entity.

Constraint and index names follow `NAMING_CONVENTION`, so two entity modules
declaring the same kind of constraint always produce the same schema names,
e.g. ``uq_user_email`` or ``fk_post_author_id_user``.
"""

from sqlalchemy import MetaData

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ix": "ix_%(table_name)s_%(column_0_N_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
