"""
Class store - the single owner of the persisted document.

Holds the whole multi-class document in memory, persists it after every
mutating operation and handles import/export of class files.

Scope:
    Unassigned  current_class_id is None, the unassigned bucket is active
    InClass(id) current_class_id names an existing class

Loading never fails on bad content: the current document is repaired,
a legacy document is migrated once (and persisted), and otherwise a
fresh document with the default taxonomy is used. Notes about what had
to be repaired are kept in ``last_load_issues``.

Two stores over the same backend do not see each other's changes; the
last one to save wins.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from zeugnis.config.constants import (
    ALL_CLASSES,
    CLASS_ID_PREFIX,
    EXPORT_FILE_PREFIX,
    EXPORT_PREFIX_ALL,
    EXPORT_PREFIX_CLASS_FALLBACK,
    EXPORT_PREFIX_UNASSIGNED,
    STORAGE_KEY_LEGACY,
    STORAGE_KEY_MULTI_CLASS,
    STORAGE_VERSION,
    STUDENT_ID_PREFIX,
    UNASSIGNED,
)
from zeugnis.config.logging_config import get_logger
from zeugnis.config.settings import Settings, get_settings
from zeugnis.core.class_validation import format_mismatch_warning, validate_class_name
from zeugnis.core.consensus import add_rating_event, remove_rating_event
from zeugnis.core.exceptions import (
    ClassNotFoundError,
    ClassValidationError,
    InvalidImportFormatError,
    StorageError,
    StorageFullError,
    StorageQuotaExceededError,
    StudentNotFoundError,
    ValidationError,
)
from zeugnis.core.models import (
    AllClassesExport,
    ClassData,
    ClassExport,
    DataFormat,
    MultiClassStorage,
    Student,
    Subject,
    generate_id,
)
from zeugnis.core.sanitizer import sanitize_students, sanitize_subjects
from zeugnis.core.taxonomy import initial_subjects
from zeugnis.core.timestamps import now_ms, to_iso
from zeugnis.storage.documents import (
    InvalidDocument,
    LegacyDocument,
    MultiClassDocument,
    classify_document,
    empty_document,
    migrate_from_legacy,
    repair_document,
)
from zeugnis.storage.file_store import FileStorage, KeyValueStorage

logger = get_logger(__name__)

CORRUPT_SUFFIX = ".corrupt"


@dataclass(frozen=True)
class ImportOutcome:
    """
    Result of ``handle_import``.

    When ``needs_confirmation`` is set nothing was imported; show
    ``message`` and call ``force_import_all_classes`` on consent.
    """
    format: DataFormat
    target: str
    needs_confirmation: bool = False
    message: Optional[str] = None
    imported_students: int = 0


def dump_json(payload: Any, indent: Optional[int] = 2) -> str:
    """Serialize a model or plain data the way files are written (camelCase keys)."""
    if hasattr(payload, 'model_dump'):
        payload = payload.model_dump(mode='json', by_alias=True)
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def generate_file_name(target: str, class_name: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """
    Build the export file name.

    Format: ``BewertungSaph_{prefix}_{YYYY-MM-DD}_{HH-MM-SS}.json`` where the
    prefix is ``Alle_Klassen``, ``Ohne_Klasse`` or the class name with
    whitespace runs replaced by ``_``.
    """
    now = now or datetime.now()
    if target == ALL_CLASSES:
        prefix = EXPORT_PREFIX_ALL
    elif target == UNASSIGNED:
        prefix = EXPORT_PREFIX_UNASSIGNED
    elif class_name and class_name.strip():
        prefix = re.sub(r'\s+', '_', class_name.strip())
    else:
        prefix = EXPORT_PREFIX_CLASS_FALLBACK
    return f"{EXPORT_FILE_PREFIX}_{prefix}_{now.strftime('%Y-%m-%d')}_{now.strftime('%H-%M-%S')}.json"


class ClassStore:
    """
    Class management over a key/value storage backend.

    Args:
        storage: Backend to persist to (default: FileStorage in settings.data_dir)
        settings: Settings instance (default: cached global settings)
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        if storage is None:
            storage = FileStorage(self.settings.data_dir, self.settings.storage_quota_bytes)
        self.storage = storage
        self.last_load_issues: List[str] = []
        self._document = empty_document()
        self.initialize()

    # ==================== LOADING ====================

    def _read_json(self, key: str) -> Any:
        """Read and parse one key; unreadable content is backed up and treated as absent."""
        try:
            text = self.storage.get_item(key)
        except StorageError as e:
            logger.error(f"Could not read {key}: {e}")
            self.last_load_issues.append(f"{key} could not be read")
            return None
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Stored document {key} is not valid JSON: {e}")
            self.last_load_issues.append(f"{key} is not valid JSON")
            self._backup(key, text)
            return None

    def _backup(self, key: str, text: str) -> None:
        try:
            self.storage.set_item(key + CORRUPT_SUFFIX, text)
            logger.warning(f"Unreadable document saved as {key}{CORRUPT_SUFFIX}")
        except StorageError as e:
            logger.error(f"Could not back up unreadable document {key}: {e}")

    def initialize(self) -> MultiClassStorage:
        """
        Load the document from storage.

        Order: current document (repaired), legacy document (migrated and
        persisted immediately), fresh document.
        """
        self.last_load_issues = []

        data = self._read_json(STORAGE_KEY_MULTI_CLASS)
        if data is not None:
            classified = classify_document(data)
            if isinstance(classified, MultiClassDocument):
                self._document = repair_document(classified.data, self.last_load_issues, self.settings)
                logger.info(
                    f"Loaded {len(self._document.classes)} classes, "
                    f"{len(self._document.unassigned_students)} unassigned students"
                )
                return self._document
            logger.error(f"Stored document has unexpected shape ({classified.format.value}), ignoring it")
            self.last_load_issues.append("Stored document has an unexpected shape")
            self._backup(STORAGE_KEY_MULTI_CLASS, json.dumps(data, ensure_ascii=False))

        legacy = self._read_json(STORAGE_KEY_LEGACY)
        if legacy is not None:
            classified = classify_document(legacy)
            if isinstance(classified, LegacyDocument):
                self._document = migrate_from_legacy(classified.data, self.last_load_issues, self.settings)
                try:
                    self.save()
                except StorageError as e:
                    # Stays in memory; the migration runs again on next load
                    logger.error(f"Could not persist migrated document: {e}")
                return self._document
            logger.warning(f"Legacy document ignored: {classified.format.value}")

        self._document = empty_document()
        return self._document

    def load(self) -> MultiClassStorage:
        """Re-read the document from storage, discarding unsaved memory state."""
        return self.initialize()

    # ==================== PERSISTENCE ====================

    def save(self) -> None:
        """
        Persist the in-memory document.

        Raises:
            StorageFullError: If the document exceeds max_document_bytes or
                the backend quota is exhausted. Memory is not rolled back.
        """
        payload = dump_json(self._document, indent=None)
        size = len(payload.encode('utf-8'))
        limit = self.settings.max_document_bytes
        if size > limit:
            logger.error(f"Document too large to save: {size} bytes (max {limit})")
            raise StorageFullError(
                f"Daten zu groß für LocalStorage (max. {limit / (1024 * 1024):g}MB). "
                "Bitte exportieren Sie Ihre Daten und löschen Sie alte Klassen.",
                {'size_bytes': size, 'max_bytes': limit},
            )
        try:
            self.storage.set_item(STORAGE_KEY_MULTI_CLASS, payload)
        except StorageQuotaExceededError as e:
            logger.error(f"Storage quota exceeded while saving {size} bytes")
            raise StorageFullError(details={'size_bytes': size}) from e

    def _commit(self, **updates) -> None:
        updates['last_modified'] = now_ms()
        self._document = self._document.model_copy(update=updates)
        self.save()

    def _replace_class(self, class_id: str, **updates) -> ClassData:
        target = self._require_class(class_id)
        updated = target.model_copy(update={**updates, 'last_modified': now_ms()})
        self._commit(classes=[updated if c.id == class_id else c for c in self._document.classes])
        return updated

    # ==================== CLASSES ====================

    def _require_class(self, class_id: str) -> ClassData:
        class_data = self.get_class(class_id)
        if class_data is None:
            raise ClassNotFoundError(class_id)
        return class_data

    def create_class(
        self,
        name: str,
        students: Optional[Iterable[Any]] = None,
        subjects: Optional[Iterable[Any]] = None
    ) -> ClassData:
        """
        Create a class. The active scope does not change.

        Raises:
            ClassValidationError: Empty, too long or duplicate name
        """
        result = validate_class_name(name, self._document.classes)
        if not result.valid:
            raise ClassValidationError(result.error, field='name')

        new_class = ClassData(
            id=self._unique_id(CLASS_ID_PREFIX, {c.id for c in self._document.classes}),
            name=name.strip(),
            students=sanitize_students(list(students), settings=self.settings) if students is not None else [],
            subjects=sanitize_subjects(list(subjects), initial_subjects) if subjects is not None else initial_subjects(),
            last_modified=now_ms(),
        )
        self._commit(classes=[*self._document.classes, new_class])
        logger.info(f"Created class {new_class.id}")
        return new_class

    def rename_class(self, class_id: str, name: str) -> ClassData:
        """
        Rename a class.

        Raises:
            ClassNotFoundError: Unknown class id
            ClassValidationError: Invalid or duplicate name
        """
        self._require_class(class_id)
        result = validate_class_name(name, self._document.classes, exclude_class_id=class_id)
        if not result.valid:
            raise ClassValidationError(result.error, field='name')
        return self._replace_class(class_id, name=name.strip())

    def delete_class(self, class_id: str) -> None:
        """
        Delete a class together with its students.

        If it was active, the scope falls back to the unassigned bucket.
        """
        deleted = self._require_class(class_id)
        updates = {'classes': [c for c in self._document.classes if c.id != class_id]}
        if self._document.current_class_id == class_id:
            updates['current_class_id'] = None
        self._commit(**updates)
        logger.info(f"Deleted class {class_id} ({len(deleted.students)} students)")

    def get_class(self, class_id: str) -> Optional[ClassData]:
        return next((c for c in self._document.classes if c.id == class_id), None)

    def get_all_classes(self) -> List[ClassData]:
        return list(self._document.classes)

    def has_classes(self) -> bool:
        return bool(self._document.classes)

    # ==================== SCOPE ====================

    def switch_to_class(self, class_id: str) -> ClassData:
        class_data = self._require_class(class_id)
        self._commit(current_class_id=class_id)
        return class_data

    def switch_to_unassigned(self) -> None:
        self._commit(current_class_id=None)

    def get_current_class_id(self) -> Optional[str]:
        return self._document.current_class_id

    def get_current_class(self) -> Optional[ClassData]:
        if self._document.current_class_id is None:
            return None
        return self.get_class(self._document.current_class_id)

    def get_current_students(self) -> List[Student]:
        current = self.get_current_class()
        if current is not None:
            return list(current.students)
        return list(self._document.unassigned_students)

    def get_current_subjects(self) -> List[Subject]:
        current = self.get_current_class()
        if current is not None:
            return list(current.subjects)
        return list(self._document.unassigned_subjects)

    def get_unassigned_students(self) -> List[Student]:
        return list(self._document.unassigned_students)

    def get_unassigned_subjects(self) -> List[Subject]:
        return list(self._document.unassigned_subjects)

    def has_unassigned_students(self) -> bool:
        return bool(self._document.unassigned_students)

    def get_storage(self) -> MultiClassStorage:
        """The whole document (immutable)."""
        return self._document

    # ==================== SCOPE CONTENT ====================

    def update_current_class(self, students: Iterable[Student], subjects: Optional[Iterable[Subject]] = None) -> None:
        """Replace the students (and optionally subjects) of the active scope."""
        current = self.get_current_class()
        if current is None:
            self.update_unassigned_students(students, subjects)
            return
        updates = {'students': list(students)}
        if subjects is not None:
            updates['subjects'] = list(subjects)
        self._replace_class(current.id, **updates)

    def update_unassigned_students(self, students: Iterable[Student], subjects: Optional[Iterable[Subject]] = None) -> None:
        """Replace the unassigned students (and optionally subjects)."""
        updates = {'unassigned_students': list(students)}
        if subjects is not None:
            updates['unassigned_subjects'] = list(subjects)
        self._commit(**updates)

    def _all_student_ids(self) -> set[str]:
        ids = {s.id for s in self._document.unassigned_students}
        for class_data in self._document.classes:
            ids.update(s.id for s in class_data.students)
        return ids

    @staticmethod
    def _unique_id(prefix: str, taken: set[str]) -> str:
        while True:
            candidate = generate_id(prefix)
            if candidate not in taken:
                return candidate

    def _update_student(self, student_id: str, change: Callable[[Student], Student]) -> Student:
        students = self.get_current_students()
        for index, student in enumerate(students):
            if student.id == student_id:
                students[index] = change(student)
                self.update_current_class(students)
                return students[index]
        raise StudentNotFoundError(student_id)

    def add_student(self, name: str) -> Student:
        """Add a student with a fresh id to the active scope."""
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Student name must not be empty")
        student = Student(id=self._unique_id(STUDENT_ID_PREFIX, self._all_student_ids()), name=name.strip())
        self.update_current_class([*self.get_current_students(), student])
        return student

    def delete_student(self, student_id: str) -> None:
        students = self.get_current_students()
        remaining = [s for s in students if s.id != student_id]
        if len(remaining) == len(students):
            raise StudentNotFoundError(student_id)
        self.update_current_class(remaining)

    def record_rating(
        self,
        student_id: str,
        competency_id: str,
        rating: int,
        timestamp: Optional[int] = None
    ) -> Student:
        """Append a rating click for a student of the active scope."""
        return self._update_student(
            student_id, lambda s: add_rating_event(s, competency_id, rating, timestamp, self.settings)
        )

    def delete_rating(self, student_id: str, competency_id: str, rating: int, timestamp: int) -> Student:
        """Remove one rating click from a student's history."""
        return self._update_student(
            student_id, lambda s: remove_rating_event(s, competency_id, rating, timestamp)
        )

    # ==================== EXPORT ====================

    def export_class(self, target: str) -> ClassExport:
        """
        Export one scope (class id or ``"unassigned"``) in the legacy shape.
        """
        if target == UNASSIGNED:
            students = self._document.unassigned_students
            subjects = self._document.unassigned_subjects
        else:
            class_data = self._require_class(target)
            students, subjects = class_data.students, class_data.subjects
        return ClassExport(
            version=STORAGE_VERSION,
            export_date=to_iso(now_ms()),
            students=students,
            subjects=subjects,
        )

    def export_all_classes(self) -> AllClassesExport:
        return AllClassesExport(
            version=STORAGE_VERSION,
            export_date=to_iso(now_ms()),
            classes=self._document.classes,
            unassigned_students=self._document.unassigned_students,
            unassigned_subjects=self._document.unassigned_subjects,
        )

    # ==================== IMPORT ====================

    def import_to_class(self, data: Any, target: str) -> ImportOutcome:
        """
        Overwrite one scope with a legacy-shaped file.

        A multi-class file is not imported; the outcome asks for
        confirmation instead.

        Raises:
            InvalidImportFormatError: File has no recognizable shape
            ClassNotFoundError: Unknown target class
        """
        classified = classify_document(data)
        if isinstance(classified, MultiClassDocument):
            return self._confirmation(data, target)
        if isinstance(classified, InvalidDocument):
            logger.warning(f"Rejected import: {classified.reason}")
            raise InvalidImportFormatError()

        payload = classified.data
        if target == UNASSIGNED:
            current_subjects = self._document.unassigned_subjects
        else:
            current_subjects = self._require_class(target).subjects

        students = sanitize_students(payload['students'], settings=self.settings)
        # A file without a taxonomy keeps the scope's subjects
        subjects = sanitize_subjects(payload['subjects'], lambda: list(current_subjects)) or list(current_subjects)

        if target == UNASSIGNED:
            self._commit(unassigned_students=students, unassigned_subjects=subjects)
        else:
            self._replace_class(target, students=students, subjects=subjects)

        logger.info(f"Imported {len(students)} students into {target}")
        return ImportOutcome(DataFormat.LEGACY, target, imported_students=len(students))

    def import_all_classes(self, data: Any) -> ImportOutcome:
        """
        Replace the whole document with a multi-class file.

        The scope is reset to the unassigned bucket.

        Raises:
            InvalidImportFormatError: File is not a multi-class document
        """
        classified = classify_document(data)
        if not isinstance(classified, MultiClassDocument):
            logger.warning(f"Rejected full import of {classified.format.value} data")
            raise InvalidImportFormatError()

        document = repair_document(classified.data, settings=self.settings)
        self._document = document.model_copy(update={'current_class_id': None, 'last_modified': now_ms()})
        self.save()
        count = len(document.unassigned_students) + sum(len(c.students) for c in document.classes)
        logger.info(f"Imported {len(document.classes)} classes ({count} students)")
        return ImportOutcome(DataFormat.MULTI_CLASS, ALL_CLASSES, imported_students=count)

    def force_import_all_classes(self, data: Any) -> ImportOutcome:
        """Full import after the user confirmed the overwrite."""
        return self.import_all_classes(data)

    def handle_import(self, file_data: Any, target: str) -> ImportOutcome:
        """
        Import a parsed file into ``target`` (class id, ``"unassigned"`` or ``"all"``).

        - multi-class into "all": full replacement
        - multi-class into one scope: nothing happens, confirmation needed
        - legacy into "all": goes to the unassigned bucket
        - legacy into one scope: that scope is overwritten

        Raises:
            InvalidImportFormatError: File has no recognizable shape
            ClassNotFoundError: Unknown target class
        """
        classified = classify_document(file_data)
        if isinstance(classified, InvalidDocument):
            logger.warning(f"Rejected import: {classified.reason}")
            raise InvalidImportFormatError()
        if isinstance(classified, MultiClassDocument):
            if target == ALL_CLASSES:
                return self.import_all_classes(file_data)
            return self._confirmation(file_data, target)
        return self.import_to_class(file_data, UNASSIGNED if target == ALL_CLASSES else target)

    def _confirmation(self, file_data: Any, target: str) -> ImportOutcome:
        if target != UNASSIGNED:
            self._require_class(target)
        return ImportOutcome(
            DataFormat.MULTI_CLASS,
            target,
            needs_confirmation=True,
            message=self.format_mismatch_warning(target, file_data),
        )

    def format_mismatch_warning(self, target: str, file_data: Any, class_name: Optional[str] = None) -> str:
        """Confirmation text for loading a multi-class file into one scope."""
        if class_name is None and target != UNASSIGNED:
            class_data = self.get_class(target)
            class_name = class_data.name if class_data is not None else None
        if hasattr(file_data, 'model_dump'):
            file_data = file_data.model_dump(mode='json', by_alias=True)
        return format_mismatch_warning(target, file_data, class_name)
