"""
schema_doctor - сверка схемы БД с моделями ORM.
"""

from schema_doctor.core.constants import VERSION

__version__ = VERSION
