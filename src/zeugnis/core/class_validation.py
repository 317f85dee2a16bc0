"""
Class validation utilities.

Pure checks used by the class store before creating or renaming a
class, and the confirmation text shown before a multi-class file
overwrites the whole document.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from zeugnis.config.constants import MAX_CLASS_NAME_LENGTH, UNASSIGNED, UNASSIGNED_DISPLAY_NAME


@dataclass(frozen=True)
class ClassNameValidation:
    """Result of class name validation."""
    valid: bool
    error: Optional[str] = None


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def validate_class_name(
    name: Any,
    existing_classes: Iterable[Any],
    exclude_class_id: Optional[str] = None
) -> ClassNameValidation:
    """
    Validate a class name for creation or rename.

    Names are compared trimmed and case-sensitive. When renaming, pass
    the class's own id as ``exclude_class_id`` so it does not collide
    with itself.

    Args:
        name: Proposed class name
        existing_classes: ClassData instances or mappings with ``name``/``id``
        exclude_class_id: Class to skip in the duplicate check

    Returns:
        ClassNameValidation with valid flag and German error message
    """
    if not isinstance(name, str) or not name.strip():
        return ClassNameValidation(False, 'Klassenname darf nicht leer sein')

    trimmed = name.strip()
    if len(trimmed) > MAX_CLASS_NAME_LENGTH:
        return ClassNameValidation(False, f'Klassenname zu lang (max. {MAX_CLASS_NAME_LENGTH} Zeichen)')

    for existing in existing_classes:
        if exclude_class_id is not None and _field(existing, 'id') == exclude_class_id:
            continue
        if _field(existing, 'name') == trimmed:
            return ClassNameValidation(False, 'Eine Klasse mit diesem Namen existiert bereits')

    return ClassNameValidation(True)


def format_mismatch_warning(
    selected_target: str,
    file_data: Any,
    target_class_name: Optional[str] = None
) -> str:
    """
    Build the confirmation text for loading a multi-class file into one scope.

    Args:
        selected_target: Class id or "unassigned" the user picked
        file_data: Parsed multi-class file
        target_class_name: Display name of the picked class

    Returns:
        Message asking the user to confirm the full overwrite
    """
    if selected_target == UNASSIGNED:
        target_name = UNASSIGNED_DISPLAY_NAME
    else:
        target_name = target_class_name or 'unbekannte Klasse'

    classes = _field(file_data, 'classes')
    unassigned = _field(file_data, 'unassignedStudents')
    if unassigned is None:
        unassigned = _field(file_data, 'unassigned_students')
    class_count = len(classes) if isinstance(classes, list) else 0
    has_unassigned = isinstance(unassigned, list) and len(unassigned) > 0

    plural = 'n' if class_count != 1 else ''
    if class_count > 0 and has_unassigned:
        description = f'{class_count} Klasse{plural} und Schüler ohne Zuordnung'
    elif class_count > 0:
        description = f'{class_count} Klasse{plural}'
    elif has_unassigned:
        description = 'Schüler ohne Zuordnung'
    else:
        description = 'alle Klassen'

    return (
        f'Sie haben "{target_name}" zum Laden ausgewählt, aber die Datei enthält Daten für {description}.\n\n'
        'Wenn Sie fortfahren, wird Ihr gesamter LocalStorage überschrieben.\n\n'
        'Möchten Sie fortfahren?'
    )
