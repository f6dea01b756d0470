"""
Константы schema_doctor: сверка схемы БД с моделями ORM.
"""

# Версия системы
VERSION = "1.0.0"
TOOL_NAME = "Schema Doctor"

# Служебная таблица миграций - никогда не сопоставляется модели
SCHEMA_MIGRATIONS_TABLE = "schema_migrations"

# Колонки-метки времени заполняются ORM автоматически
TIMESTAMP_COLUMNS = ("created_at", "updated_at")

DEFAULT_PRIMARY_KEY = "id"

FINDING_MESSAGE_TEMPLATE = (
    "add a presence validator to {model}.{column} - it's NOT NULL but lacks a validator"
)

# Уровни критичности находок
LEVELS = {
    'CRITICAL': {
        'value': 0,
        'description': 'Блокирует слияние, требует немедленного вмешательства',
        'emoji': '🛑'
    },
    'HIGH': {
        'value': 1,
        'description': 'Высокий риск, требует внимания перед слиянием',
        'emoji': '⚠️'
    },
    'MEDIUM': {
        'value': 2,
        'description': 'Средний риск, рекомендуется проверить',
        'emoji': '🔶'
    },
    'LOW': {
        'value': 3,
        'description': 'Низкий риск, информационное сообщение',
        'emoji': 'ℹ️'
    }
}

# Форматы вывода
OUTPUT_FORMATS = ('json', 'text', 'markdown')

# Форматы файлов каталога моделей и конфигурации
JSON_SUFFIXES = ('.json',)
YAML_SUFFIXES = ('.yaml', '.yml')

# Конфигурационные параметры по умолчанию
DEFAULT_CONFIG = {
    'rule_order': 'by_id',
    'max_total_findings': None,
    'rules': {},
    'report': {
        'tool_name': TOOL_NAME,
        'version': VERSION,
        'max_findings_in_report': None,
    },
}
