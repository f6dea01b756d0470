"""
Командная строка schema_doctor.

Коды возврата:
    0 - прогон завершён
    1 - ошибка (файлы, парсинг, интроспекция, конфигурация)
    2 - есть находки и указан --fail-on-findings
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from schema_doctor.catalog import load_models
from schema_doctor.config import load_config
from schema_doctor.core.constants import OUTPUT_FORMATS, VERSION
from schema_doctor.core.exceptions import SchemaDoctorError, SchemaFileNotFoundError, handle_exception
from schema_doctor.detection import SchemaDoctor, Reporter
from schema_doctor.introspection import DDLIntrospector, DatabaseIntrospector, SchemaIntrospector

logger = logging.getLogger("schema_doctor")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="schema-doctor",
        description="Сверка схемы БД с моделями ORM: колонки NOT NULL без валидатора присутствия",
    )

    parser.add_argument(
        "--models",
        required=True,
        help="Файл описания моделей (.json, .yaml, .yml)",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--schema",
        help="SQL-файл со схемой (DDL)",
    )
    source.add_argument(
        "--database-url",
        help="URL базы данных SQLAlchemy (например postgresql://user@host/db)",
    )

    parser.add_argument(
        "--config",
        help="Файл конфигурации (.json, .yaml, .yml)",
    )

    parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default="text",
        help="Формат отчёта (по умолчанию: text)",
    )

    parser.add_argument(
        "--out",
        help="Файл для сохранения отчёта (если не указан - вывод в stdout)",
    )

    parser.add_argument(
        "--fail-on-findings",
        action="store_true",
        help="Код возврата 2, если обнаружены находки",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Подробный лог (DEBUG)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_sql_file(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaFileNotFoundError(path, str(e)) from e


def build_introspector(args: argparse.Namespace) -> SchemaIntrospector:
    if args.schema:
        return DDLIntrospector.from_sql(read_sql_file(args.schema), name=args.schema, verbose=args.verbose)
    return DatabaseIntrospector(args.database_url)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    reporter = Reporter()
    try:
        config = load_config(args.config)
        reporter = Reporter(config.get("report", {}))
        models = load_models(args.models)
        introspector = build_introspector(args)
        try:
            report = SchemaDoctor(config).run(models, introspector)
        finally:
            if isinstance(introspector, DatabaseIntrospector):
                introspector.close()
    except SchemaDoctorError as e:
        logger.debug("Прогон прерван", exc_info=True)
        print(f"Критическая ошибка анализа: {e}", file=sys.stderr)
        # json-потребителю нужен машиночитаемый отчёт и при ошибке
        if args.format == "json":
            output = reporter.export(reporter.build_error_report(handle_exception(e)),
                                     format="json", output_file=args.out)
            if output:
                print(output)
        return 1

    output = reporter.export(report, format=args.format, output_file=args.out)
    if output:
        print(output)

    if args.fail_on_findings and report["summary"]["has_findings"]:
        return 2
    return 0
