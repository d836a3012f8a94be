"""
Rooms and restaurants were first stored with a different set of field names.
Records are migrated when they are loaded, so the rest of the code only
deals with the canonical names.
"""
from typing import Dict, Set

from chalicelib.constants.constants import CURRENT_SCHEMA_VERSION
from chalicelib.utils.data import to_int
from chalicelib.utils.logger import logger

# legacy field name -> canonical field name
ROOM_LEGACY_FIELDS = {
    'name': 'title',
    'images': 'gallery',
    'description': 'about',
    'highlights': 'amenities',
}

RESTAURANT_LEGACY_FIELDS = {
    'images': 'gallery',
}

EMPTY_VALUES = (None, '', [], {})


def get_schema_version(record: Dict) -> int:
    return to_int(record.get('schema_version')) or 1


def migrate_legacy_fields(record: Dict, legacy_fields: Dict[str, str]) -> Dict:
    if get_schema_version(record) >= CURRENT_SCHEMA_VERSION:
        return record
    migrated = dict(record)
    for legacy_field, canonical_field in legacy_fields.items():
        legacy_value = migrated.pop(legacy_field, None)
        if legacy_value not in EMPTY_VALUES and migrated.get(canonical_field) in EMPTY_VALUES:
            migrated[canonical_field] = legacy_value
    migrated['schema_version'] = CURRENT_SCHEMA_VERSION
    logger.debug(f"migrate_legacy_fields ::: record id={record.get('id_')} migrated to "
                 f"schema_version={CURRENT_SCHEMA_VERSION}")
    return migrated


def migrated_fields(db_record: Dict, legacy_fields: Dict[str, str]) -> Set[str]:
    """
    Canonical fields to write back when a legacy record is updated
    """
    if not db_record or get_schema_version(db_record) >= CURRENT_SCHEMA_VERSION:
        return set()
    return {*legacy_fields.values(), 'schema_version'}
