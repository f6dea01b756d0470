"""
reporter.py

Генерация и экспорт отчётов schema_doctor.

Цели:
- единый контракт отчёта (metadata/summary/findings/analysis/performance)
- экспорт: json / text / markdown

Важно:
- reporter НЕ зависит от конкретных правил.
- reporter работает с тем, что возвращает RuleRegistry.apply_all(...).
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
import json

from schema_doctor.core.constants import LEVELS, OUTPUT_FORMATS, TOOL_NAME, VERSION


class Reporter:
    """
    Построитель и экспортёр отчётов.

    Конвенции:
    - Уровни критичности: CRITICAL/HIGH/MEDIUM/LOW (в отчёте - нижний регистр).
    - report['findings'] - плоский список находок, усечённый до max_findings_in_report;
      summary.total_findings всегда считает все нарушения.
    """

    DEFAULT_LEVEL_ORDER = ["critical", "high", "medium", "low"]

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        limit = self.config.get("max_findings_in_report")
        self.max_findings_in_report = int(limit) if limit is not None else None
        self.tool_name = self.config.get("tool_name", TOOL_NAME)
        self.version = self.config.get("version", VERSION)

    # ---------------------------------------------------------------------
    # 1) BUILD REPORT
    # ---------------------------------------------------------------------

    def build_report(
            self,
            *,
            result: Optional[Dict[str, Any]] = None,
            models: Optional[Sequence[Any]] = None,
            schema: Optional[Dict[str, Any]] = None,
            performance: Optional[Dict[str, Any]] = None,
            metadata_overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Формирует единый отчёт.

        Args:
            result: результат от RuleRegistry.apply_all(...)
                   ожидаемые ключи: findings, statistics, summary
            models: проверенные модели (для сводки)
            schema: SchemaIntrospector.describe()
            performance: словарь с метриками времени
            metadata_overrides: доп. поля metadata
        """
        result = result or {}
        findings: List[Dict[str, Any]] = [f for f in result.get("findings", []) if isinstance(f, dict)]
        statistics: List[Dict[str, Any]] = result.get("statistics", [])

        metadata = {
            "timestamp": datetime.now().isoformat(),
            "version": self.version,
            "tool": self.tool_name,
        }
        if metadata_overrides:
            metadata.update(metadata_overrides)

        # счётчики по статистике правил: она не зависит от лимитов
        if statistics:
            by_rule = self._count_raw(statistics, "rule_id")
            by_level = self._count_raw(statistics, "level")
            total = sum(by_rule.values())
        else:
            by_rule = self._count_by(findings, "rule")
            by_level = self._count_by(findings, "level")
            total = len(findings)

        shown = findings
        if self.max_findings_in_report is not None:
            shown = findings[: self.max_findings_in_report]

        return {
            "metadata": metadata,
            "summary": {
                "has_findings": total > 0,
                "total_findings": total,
                "reported_findings": len(shown),
                "models_checked": len(models or []),
                "by_rule": by_rule,
                "by_level": by_level,
                "truncated": len(shown) < total,
            },
            "findings": shown,
            "analysis": {
                "schema": schema or {},
                "rules": statistics,
            },
            "performance": performance or {},
        }

    def build_error_report(self, error: Dict[str, Any]) -> Dict[str, Any]:
        """Формирует отчёт об ошибке (error - результат handle_exception)."""
        return {
            "metadata": {
                "timestamp": datetime.now().isoformat(),
                "status": "ERROR",
                "version": self.version,
                "tool": self.tool_name,
            },
            "error": error,
            "summary": {
                "has_findings": False,
                "total_findings": 0,
                "reported_findings": 0,
                "models_checked": 0,
                "by_rule": {},
                "by_level": {},
                "truncated": False,
            },
            "findings": [],
            "analysis": {},
            "performance": {},
        }

    # ---------------------------------------------------------------------
    # 2) EXPORT
    # ---------------------------------------------------------------------

    def export(
            self,
            report: Dict[str, Any],
            *,
            format: str = "json",
            output_file: Optional[Union[str, Path]] = None
    ) -> str:
        """
        Экспорт отчёта в заданном формате.

        Args:
            report: отчёт
            format: json | text | markdown
            output_file: если задан - сохраняет в файл и возвращает пустую строку
        """
        fmt = (format or "json").lower().strip()

        if fmt == "json":
            output = self._export_json(report)
        elif fmt == "text":
            output = self._export_text(report)
        elif fmt == "markdown":
            output = self._export_markdown(report)
        else:
            raise ValueError(f"Неподдерживаемый формат: {format}. Доступные: {', '.join(OUTPUT_FORMATS)}")

        if output_file:
            path = Path(output_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(output, encoding="utf-8")
            return ""
        return output

    def _export_json(self, report: Dict[str, Any]) -> str:
        return json.dumps(report, indent=2, ensure_ascii=False, default=str)

    def _export_text(self, report: Dict[str, Any]) -> str:
        summary = report.get("summary", {}) or {}
        metadata = report.get("metadata", {}) or {}
        findings = report.get("findings", []) or []

        out: List[str] = []
        out.append("=" * 70)
        out.append("ОТЧЁТ О СВЕРКЕ СХЕМЫ И МОДЕЛЕЙ")
        out.append("=" * 70)
        out.append("")
        out.append("МЕТАДАННЫЕ:")
        out.append(f"  Время анализа: {metadata.get('timestamp', 'N/A')}")
        out.append(f"  Версия инструмента: {metadata.get('version', 'N/A')}")
        out.append(f"  Инструмент: {metadata.get('tool', 'N/A')}")
        out.append("")

        error = report.get("error")
        if error:
            out.append(f"ОШИБКА: {error.get('error', 'N/A')} ({error.get('code', 'UNKNOWN_ERROR')})")
            out.append("\n" + "=" * 70)
            return "\n".join(out)

        out.append("СВОДКА:")
        out.append(f"  Проверено моделей: {summary.get('models_checked', 0)}")
        out.append(f"  Обнаружено находок: {summary.get('total_findings', 0)}")
        out.append("")

        if not findings:
            out.append("НАХОДОК НЕ ОБНАРУЖЕНО")
        else:
            by_rule = summary.get("by_rule", {})
            if by_rule:
                out.append("ПО ПРАВИЛАМ:")
                for rule_id, count in sorted(by_rule.items()):
                    out.append(f"  {rule_id}: {count}")

            grouped = self._group_by_level(findings)
            for lvl in self.DEFAULT_LEVEL_ORDER:
                items = grouped.get(lvl, [])
                if not items:
                    continue

                emoji = LEVELS.get(lvl.upper(), {}).get("emoji", "")
                out.append(f"\n{emoji} [{lvl.upper()}] ({len(items)}):")
                for i, f in enumerate(items, 1):
                    out.append(f"  {i}. {f.get('message', 'N/A')}")
                    obj = self._format_object_from_details(f.get("details", {}))
                    if obj:
                        out.append(f"     Объект: {obj}")

            if summary.get("truncated"):
                out.append(f"\n  ... показаны первые {len(findings)} из {summary.get('total_findings')}")

        perf = report.get("performance", {})
        if perf:
            out.append("\n" + "=" * 70)
            out.append("ПРОИЗВОДИТЕЛЬНОСТЬ:")
            out.append(f"  Общее время: {perf.get('total_time', 0):.4f}с")
            out.append(f"  Парсинг: {perf.get('parsing_time', 0):.4f}с")
            out.append(f"  Проверка правил: {perf.get('rule_application_time', 0):.4f}с")

        out.append("\n" + "=" * 70)
        return "\n".join(out)

    def _export_markdown(self, report: Dict[str, Any]) -> str:
        """Экспорт в Markdown формат."""
        summary = report.get("summary", {}) or {}
        metadata = report.get("metadata", {}) or {}
        findings = report.get("findings", []) or []

        out: List[str] = []
        out.append("# Отчёт о сверке схемы и моделей")
        out.append("")

        out.append("## Метаданные")
        out.append(f"- **Время анализа:** {metadata.get('timestamp', 'N/A')}")
        out.append(f"- **Версия инструмента:** {metadata.get('version', 'N/A')}")
        out.append(f"- **Инструмент:** {metadata.get('tool', 'N/A')}")
        out.append("")

        error = report.get("error")
        if error:
            out.append("## Ошибка")
            out.append(f"`{error.get('code', 'UNKNOWN_ERROR')}`: {error.get('error', 'N/A')}")
            return "\n".join(out)

        out.append("## Сводка")
        out.append(f"- **Проверено моделей:** {summary.get('models_checked', 0)}")
        out.append(f"- **Обнаружено находок:** {summary.get('total_findings', 0)}")
        out.append("")

        out.append("## Находки")
        if not findings:
            out.append("Находок не обнаружено.")
            return "\n".join(out)

        out.append("")
        out.append("| # | Уровень | Правило | Объект | Сообщение |")
        out.append("|---|---|---|---|---|")
        for i, f in enumerate(findings, 1):
            obj = self._format_object_from_details(f.get("details", {}))
            out.append(
                f"| {i} | {str(f.get('level', '')).upper()} | {f.get('rule', '')} "
                f"| `{obj}` | {f.get('message', 'N/A')} |"
            )

        if summary.get("truncated"):
            out.append("")
            out.append(f"_Показаны первые {len(findings)} из {summary.get('total_findings')}._")

        return "\n".join(out)

    # ---------------------------------------------------------------------
    # 3) INTERNAL HELPERS
    # ---------------------------------------------------------------------

    def _count_raw(self, statistics: List[Dict[str, Any]], key: str) -> Dict[str, int]:
        """Суммирует details.total_raw статистики правил по ключу (rule_id / level)."""
        counts: Dict[str, int] = {}
        for s in statistics:
            raw = int((s.get("details") or {}).get("total_raw", s.get("findings", 0)))
            if not raw:
                continue
            value = str(s.get(key, "N/A")).lower() if key == "level" else str(s.get(key, "N/A"))
            counts[value] = counts.get(value, 0) + raw
        return counts

    def _count_by(self, findings: List[Dict[str, Any]], key: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for f in findings:
            value = str(f.get(key, "N/A")).lower() if key == "level" else str(f.get(key, "N/A"))
            counts[value] = counts.get(value, 0) + 1
        return counts

    def _group_by_level(self, findings: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
        grouped: Dict[str, List[Dict[str, Any]]] = {lvl: [] for lvl in self.DEFAULT_LEVEL_ORDER}
        for f in findings:
            lvl = str(f.get("level", "medium")).lower()
            grouped.setdefault(lvl, []).append(f)
        return grouped

    def _format_object_from_details(self, details: Any) -> str:
        """
        Пытается извлечь “объект” из details: model.column / model / table.
        """
        if not isinstance(details, dict):
            return ""

        if "model" in details and "column" in details:
            return f"{details.get('model')}.{details.get('column')}"

        for k in ("model", "table"):
            if k in details:
                return str(details.get(k))

        return ""


__all__ = ["Reporter"]
