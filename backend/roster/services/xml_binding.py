"""
XML binding for Student records.

The document layout is declared once in STUDENT_XML_SCHEMA, an ordered
list of field bindings. Serialization walks it in order, so elements
always appear as:

    id, last_name, first_name, birth_date, phone_number, address,
    grades, alternative_grades, picture, badge

gender is not part of the schema and never appears in a document.
Fields whose value is None are omitted.

Example:
    <student>
      <id>7</id>
      <last_name>Curie</last_name>
      <first_name>Marie</first_name>
      <birth_date>1867-11-07</birth_date>
      <phone_number>+33 1 4427</phone_number>
      <grades>
        <grade discipline="PHYSICS">6</grade>
        <grade discipline="MATH" />
      </grades>
    </student>
"""

import base64
from collections import namedtuple
from datetime import date
import xml.etree.ElementTree as ET

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET

from roster.logging_config import get_logger, log_with_context
from roster.models.address import Address
from roster.models.badge import Badge
from roster.models.enums import Discipline
from roster.models.grade import Grade
from roster.models.phone_number import PhoneNumber
from roster.models.student import Student

logger = get_logger("xml")

ROOT_TAG = "student"

ADDRESS_FIELDS = ("street", "number", "postal_code", "city", "country")


class XmlBindingError(ValueError):
    """Raised when an XML document cannot be bound to a Student."""


# attribute: Student attribute name
# tag: element name in the document
# write(parent, tag, value): append the element for a non-None value
# read(element): decode the element back into an attribute value
FieldBinding = namedtuple("FieldBinding", ["attribute", "tag", "write", "read"])


# ── Writers ──────────────────────────────────────────────────

def _write_text(parent, tag, value):
    ET.SubElement(parent, tag).text = str(value)


def _write_date(parent, tag, value):
    ET.SubElement(parent, tag).text = value.isoformat()


def _write_address(parent, tag, address):
    element = ET.SubElement(parent, tag)
    for field in ADDRESS_FIELDS:
        value = getattr(address, field)
        if value is not None:
            ET.SubElement(element, field).text = value


def _write_grades(parent, tag, grades):
    element = ET.SubElement(parent, tag)
    for grade in grades:
        child = ET.SubElement(element, "grade", discipline=grade.discipline.name)
        if grade.grade is not None:
            child.text = str(grade.grade)


def _write_alternative_grades(parent, tag, alternative_grades):
    if not alternative_grades:
        return
    element = ET.SubElement(parent, tag)
    for discipline in Discipline:
        if discipline in alternative_grades:
            child = ET.SubElement(element, "entry", discipline=discipline.name)
            child.text = str(alternative_grades[discipline])


def _write_picture(parent, tag, picture):
    ET.SubElement(parent, tag).text = base64.b64encode(picture).decode("ascii")


def _write_badge(parent, tag, badge):
    ET.SubElement(parent, tag, number=badge.number)


# ── Readers ──────────────────────────────────────────────────

def _read_text(element):
    return element.text or ""


def _read_int(element):
    return int(_read_text(element).strip())


def _read_date(element):
    return date.fromisoformat(_read_text(element).strip())


def _read_phone_number(element):
    return PhoneNumber.parse(_read_text(element))


def _read_address(element):
    values = {child.tag: child.text for child in element if child.tag in ADDRESS_FIELDS}
    return Address(**values)


def _discipline_of(element):
    name = element.get("discipline")
    try:
        return Discipline[name]
    except KeyError:
        raise XmlBindingError("Unknown discipline {!r}".format(name))


def _read_grades(element):
    grades = []
    for child in element.findall("grade"):
        text = (child.text or "").strip()
        grades.append(Grade(_discipline_of(child), int(text) if text else None))
    return grades


def _read_alternative_grades(element):
    return {
        _discipline_of(child): int((child.text or "").strip())
        for child in element.findall("entry")
    }


def _read_picture(element):
    return base64.b64decode(_read_text(element), validate=True)


def _read_badge(element):
    number = element.get("number")
    if not number:
        raise XmlBindingError("Badge element without a number")
    return Badge(number)


STUDENT_XML_SCHEMA = (
    FieldBinding("id", "id", _write_text, _read_int),
    FieldBinding("last_name", "last_name", _write_text, _read_text),
    FieldBinding("first_name", "first_name", _write_text, _read_text),
    FieldBinding("birth_date", "birth_date", _write_date, _read_date),
    FieldBinding("phone_number", "phone_number", _write_text, _read_phone_number),
    FieldBinding("address", "address", _write_address, _read_address),
    FieldBinding("grades", "grades", _write_grades, _read_grades),
    FieldBinding("alternative_grades", "alternative_grades", _write_alternative_grades, _read_alternative_grades),
    FieldBinding("picture", "picture", _write_picture, _read_picture),
    FieldBinding("badge", "badge", _write_badge, _read_badge),
)


def student_to_element(student: Student) -> ET.Element:
    root = ET.Element(ROOT_TAG)
    for binding in STUDENT_XML_SCHEMA:
        value = getattr(student, binding.attribute, None)
        if value is not None:
            binding.write(root, binding.tag, value)
    return root


def student_to_xml(student: Student) -> bytes:
    """Serialize a student to a UTF-8 XML document with declaration."""
    document = ET.tostring(student_to_element(student), encoding="utf-8", xml_declaration=True)

    log_with_context(logger, "DEBUG", "Serialized student {}".format(student.key),
                     context={"student_id": student.key},
                     extra_data={"size": len(document)})
    return document


def _apply_grades(student, grades):
    # Update the seeded entries in place so there is still one per discipline
    by_discipline = {grade.discipline: grade for grade in student.grades}
    for grade in grades:
        if grade.discipline in by_discipline:
            by_discipline[grade.discipline].grade = grade.grade
        else:
            student.grades.append(grade)


def student_from_xml(data) -> Student:
    """
    Build a Student from an XML document (bytes or str).

    The result is not validated; call validate() or save it through the
    repository to enforce mandatory fields.
    """
    try:
        root = SafeET.fromstring(data)
    except SafeET.ParseError as exc:
        raise XmlBindingError("Malformed student document: {}".format(exc)) from exc
    except DefusedXmlException as exc:
        raise XmlBindingError("Forbidden construct in student document: {}".format(exc)) from exc

    if root.tag != ROOT_TAG:
        raise XmlBindingError("Expected <{}> root element, got <{}>".format(ROOT_TAG, root.tag))

    student = Student()
    for binding in STUDENT_XML_SCHEMA:
        element = root.find(binding.tag)
        if element is None:
            continue
        try:
            value = binding.read(element)
        except XmlBindingError:
            raise
        except ValueError as exc:
            raise XmlBindingError("Invalid <{}> element: {}".format(binding.tag, exc)) from exc

        if binding.attribute == "grades":
            _apply_grades(student, value)
        elif binding.attribute == "alternative_grades":
            student.alternative_grades.update(value)
        elif binding.attribute == "badge":
            value.student = student
            student.badge = value
        else:
            setattr(student, binding.attribute, value)

    log_with_context(logger, "DEBUG", "Parsed student {}".format(student.key),
                     context={"student_id": student.key})
    return student
