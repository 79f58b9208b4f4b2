# formwright/models/defaults.py
"""
Default field catalogs used to synthesize a schema for an entity type.

Stores call build_default_schema() when get_or_create_default() finds
nothing stored under "<entity_type>_form".
"""

from typing import Any

from formwright.models.schema import FieldKind, FormField, FormSchema
from formwright.models.store import default_key_for


def _field(name: str, label: str, kind: FieldKind, **extra: Any) -> dict[str, Any]:
    return {"name": name, "label": label, "kind": kind, **extra}


def _choices(*pairs: tuple[str, str]) -> list[dict[str, Any]]:
    return [
        {"id": str(i), "value": value, "label": label, "order": i}
        for i, (value, label) in enumerate(pairs, start=1)
    ]


# Fields whose options come from a lookup keyed by the teacher/class choice
_TEACHER_CLASS_SUBJECT = [
    _field("teacher_id", "Teacher", FieldKind.SELECT, required=True, isFilterable=True),
    _field(
        "class_id",
        "Class",
        FieldKind.SELECT,
        required=True,
        isFilterable=True,
        dependsOn=["teacher_id"],
        placeholder="Select a teacher first",
    ),
    _field(
        "subject_id",
        "Subject",
        FieldKind.SELECT,
        required=True,
        isFilterable=True,
        dependsOn=["teacher_id", "class_id"],
        placeholder="Select a class first",
    ),
]

DEFAULT_CATALOGS: dict[str, list[dict[str, Any]]] = {
    "student": [
        _field("first_name", "First Name", FieldKind.TEXT, required=True),
        _field("last_name", "Last Name", FieldKind.TEXT, required=True),
        _field("email", "Email Address", FieldKind.EMAIL, placeholder="e.g. john.doe@school.edu"),
        _field("student_id", "Student ID", FieldKind.TEXT, required=True, isFilterable=True),
        _field("admission_date", "Admission Date", FieldKind.DATE, required=True),
        _field("academic_year", "Academic Year", FieldKind.TEXT, required=True,
               validations={"pattern": r"\d{4}-\d{4}"}, placeholder="e.g. 2025-2026"),
        _field("roll_number", "Roll Number", FieldKind.NUMBER, validations={"minValue": 1}),
        _field("section", "Section", FieldKind.SELECT, isFilterable=True,
               options=_choices(("A", "Section A"), ("B", "Section B"), ("C", "Section C"))),
        _field("blood_group", "Blood Group", FieldKind.SELECT, isVisibleInListing=False,
               options=_choices(("A+", "A+"), ("A-", "A-"), ("B+", "B+"), ("B-", "B-"),
                                ("O+", "O+"), ("O-", "O-"), ("AB+", "AB+"), ("AB-", "AB-"))),
        _field("transportation_mode", "Transportation Mode", FieldKind.RADIO,
               isVisibleInListing=False,
               options=_choices(("bus", "School Bus"), ("private", "Private"), ("walk", "Walk"))),
        _field("is_hosteller", "Hosteller", FieldKind.TOGGLE, isVisibleInListing=False),
        _field("photo", "Photo", FieldKind.IMAGE, isVisibleInListing=False),
    ],
    "teacher": [
        _field("first_name", "First Name", FieldKind.TEXT, required=True),
        _field("last_name", "Last Name", FieldKind.TEXT, required=True),
        _field("email", "Email Address", FieldKind.EMAIL, required=True),
        _field("phone", "Phone", FieldKind.PHONE),
        _field("employee_id", "Employee ID", FieldKind.TEXT, required=True, isFilterable=True),
        _field("qualification", "Qualification", FieldKind.TEXT),
        _field("joining_date", "Joining Date", FieldKind.DATE),
        _field("photo", "Photo", FieldKind.IMAGE, isVisibleInListing=False),
    ],
    "class": [
        _field("name", "Class Name", FieldKind.TEXT, required=True, validations={"maxLength": 50}),
        _field("section", "Section", FieldKind.TEXT),
        _field("class_teacher_id", "Class Teacher", FieldKind.SELECT, isFilterable=True),
        _field("capacity", "Capacity", FieldKind.NUMBER, validations={"minValue": 1, "maxValue": 200}),
        _field("room", "Room", FieldKind.TEXT, isVisibleInListing=False),
    ],
    "assignment": [
        _field("title", "Title", FieldKind.TEXT, required=True, validations={"maxLength": 200}),
        _field("description", "Description", FieldKind.TEXTAREA),
        *_TEACHER_CLASS_SUBJECT,
        _field("due_date", "Due Date", FieldKind.DATE, required=True),
        _field("max_marks", "Maximum Marks", FieldKind.NUMBER, validations={"minValue": 0}),
        _field("attachment", "Attachment", FieldKind.FILE, isVisibleInListing=False),
    ],
    "exam": [
        _field("title", "Exam Title", FieldKind.TEXT, required=True),
        *_TEACHER_CLASS_SUBJECT,
        _field("exam_date", "Exam Date", FieldKind.DATE, required=True),
        _field("duration_minutes", "Duration (minutes)", FieldKind.NUMBER,
               validations={"minValue": 1, "maxValue": 600}),
        _field("total_marks", "Total Marks", FieldKind.NUMBER, validations={"minValue": 0}),
        _field("is_published", "Published", FieldKind.TOGGLE),
    ],
    "live_class": [
        _field("title", "Title", FieldKind.TEXT, required=True),
        *_TEACHER_CLASS_SUBJECT,
        _field("scheduled_at", "Scheduled Date", FieldKind.DATE, required=True),
        _field("duration_minutes", "Duration (minutes)", FieldKind.NUMBER, validations={"minValue": 5}),
        _field("meeting_url", "Meeting URL", FieldKind.URL),
    ],
}

GENERIC_CATALOG: list[dict[str, Any]] = [
    _field("name", "Name", FieldKind.TEXT, required=True),
    _field("description", "Description", FieldKind.TEXTAREA),
]


def _display_name(entity_type: str) -> str:
    return entity_type.replace("_", " ").title()


def build_default_schema(entity_type: str) -> FormSchema:
    """
    Synthesize the default schema for an entity type.

    Unknown entity types get a minimal generic template.

    Args:
        entity_type: Business entity (student, teacher, class, ...)

    Returns:
        A new FormSchema with freshly generated field ids
    """
    catalog = DEFAULT_CATALOGS.get(entity_type, GENERIC_CATALOG)
    display = _display_name(entity_type) if entity_type else "Generic"
    return FormSchema(
        key=default_key_for(entity_type),
        name=f"{display} Form",
        description=f"Default form for {display.lower()} records.",
        entity_type=entity_type,
        fields=[FormField.model_validate(entry) for entry in catalog],
    )
