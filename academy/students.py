"""
Student application status.

The user service reports a student's application state loosely: sometimes
as an ``approved`` boolean, sometimes as a status string in any case.  This
module turns those payloads into a ``StudentStatus`` at the boundary so no
raw server value leaks further in.
"""

import logging
from collections import namedtuple
from dataclasses import dataclass, asdict
from enum import Enum

logger = logging.getLogger(__name__)


class StudentStatus(str, Enum):
    INCOMPLETE = 'INCOMPLETE'
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'


# Tagged parse result: ``ok`` is False when ``value`` is the fallback default.
Parsed = namedtuple('Parsed', ['value', 'ok'])


def Ok(value):
    return Parsed(value, True)


def Fallback(default):
    return Parsed(default, False)


@dataclass
class Student:
    id: str
    status: StudentStatus
    questions_and_answers: str = ''

    def to_dict(self):
        data = asdict(self)
        data['status'] = self.status.value
        return data


def parse_status(raw):
    # bool before str: True/False are explicit decisions, not fallbacks
    if isinstance(raw, bool):
        return Ok(StudentStatus.APPROVED if raw else StudentStatus.PENDING)
    if isinstance(raw, str):
        try:
            return Ok(StudentStatus(raw.upper()))
        except ValueError:
            pass
    return Fallback(StudentStatus.PENDING)


def normalize_status(raw):
    return parse_status(raw).value


def _first_present(source, keys):
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def map_student_response(raw):
    """Map a raw student payload to a Student.

    Returns None when the payload carries no usable id; that means "not a
    student record" and callers treat it as a normal outcome.
    """
    if not isinstance(raw, dict):
        return None

    source = raw
    if 'student' in raw:
        source = raw['student'] if isinstance(raw['student'], dict) else {}

    student_id = _first_present(source, ('id', 'student_id', 'user_id'))
    if isinstance(student_id, bool) or not isinstance(student_id, (str, int)):
        return None

    parsed = parse_status(_first_present(source, ('status', 'application_status', 'approved')))
    if not parsed.ok:
        logger.info('Student %s has no recognised status, defaulting to %s',
                    student_id, parsed.value.value)

    questions = source.get('questions_and_answers')
    return Student(
        id=str(student_id),
        status=parsed.value,
        questions_and_answers=questions if isinstance(questions, str) else '',
    )
