"""
main.py

Точка входа schema_doctor: сверка схемы БД с моделями ORM.

Запуск:
    python main.py --models models.yml --schema structure.sql
    python main.py --models models.yml --schema structure.sql --format markdown --out report.md
    python main.py --models models.json --database-url postgresql://localhost/app --fail-on-findings
"""

from schema_doctor.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
