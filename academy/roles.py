from enum import Enum


class Role(str, Enum):
    STUDENT = 'student'
    TEACHER = 'teacher'
    ADMIN = 'admin'


# capability name -> roles granted it; call sites only ever name the capability
CAPABILITIES = {
    'add_course': frozenset({Role.TEACHER, Role.ADMIN}),
    'add_video': frozenset({Role.TEACHER, Role.ADMIN}),
    'manage_videos': frozenset({Role.TEACHER, Role.ADMIN}),
    'edit_event': frozenset({Role.ADMIN}),
    'admin_panel': frozenset({Role.ADMIN}),
    'approve_students': frozenset({Role.ADMIN}),
    'submit_tasks': frozenset({Role.STUDENT}),
}


def to_role(value):
    """Return the matching Role, or None for anything unrecognised."""
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        try:
            return Role(value.lower())
        except ValueError:
            return None
    return None


def normalize_role(value):
    """Profile mapping: unknown roles default to student."""
    return to_role(value) or Role.STUDENT


def can(role, capability):
    role = to_role(role)
    if role is None:
        return False
    return role in CAPABILITIES.get(capability, frozenset())


def capabilities_for(role):
    return sorted(name for name in CAPABILITIES if can(role, name))


def can_see_add_course(role):
    return can(role, 'add_course')


def is_admin(role):
    return to_role(role) is Role.ADMIN


def is_teacher(role):
    return to_role(role) is Role.TEACHER


def is_student(role):
    return to_role(role) is Role.STUDENT
