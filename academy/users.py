from academy.roles import Role, normalize_role, can

LANGUAGES = ('TR', 'EN')

MOCK_USERS = {
    Role.STUDENT: {
        'id': 'student-1',
        'name': 'Ahmet Öğrenci',
        'email': 'student@test.com',
        'role': 'student',
    },
    Role.TEACHER: {
        'id': 'teacher-1',
        'name': 'Ayşe Öğretmen',
        'email': 'teacher@test.com',
        'role': 'teacher',
    },
    Role.ADMIN: {
        'id': 'admin-1',
        'name': 'Admin User',
        'email': 'admin@test.com',
        'role': 'admin',
    },
}


def mock_user(role=None):
    return dict(MOCK_USERS[normalize_role(role)])


def _normalize_language(value):
    lang = value.upper() if isinstance(value, str) else ''
    return 'EN' if lang == 'EN' else 'TR'


def _normalize_gender(value):
    gender = value.lower() if isinstance(value, str) else ''
    return 'female' if gender == 'female' else 'male'


def _map_labels(labels):
    if not isinstance(labels, list):
        return []
    return [
        {'id': label['id'], 'name': label['name']}
        for label in labels
        if isinstance(label, dict)
        and isinstance(label.get('id'), int) and not isinstance(label.get('id'), bool)
        and isinstance(label.get('name'), str)
    ]


def map_teacher_response(teacher):
    if not isinstance(teacher, dict):
        return None
    teacher_id = teacher.get('id')
    if not isinstance(teacher_id, str) or not teacher_id:
        return None

    zoom = teacher.get('zoom_connected')
    return {
        'id': teacher_id,
        'school': teacher.get('school'),
        'branch': teacher.get('branch'),
        'zoom_connected': zoom if isinstance(zoom, bool) else zoom == 1,
    }


def map_user_response(data):
    """Map a "who am I" payload to the session's user dict, or None."""
    if not isinstance(data, dict):
        return None
    user_id = data.get('id')
    if not isinstance(user_id, str) or not user_id:
        return None

    first_name = data.get('first_name') if isinstance(data.get('first_name'), str) else ''
    last_name = data.get('last_name') if isinstance(data.get('last_name'), str) else ''
    email = data.get('email') if isinstance(data.get('email'), str) else ''
    name = ' '.join(part for part in (first_name, last_name) if part) or email

    age = data.get('age')
    points = data.get('points')
    user = {
        'id': user_id,
        'name': name,
        'email': email,
        'role': normalize_role(data.get('role')).value,
        'age': age if isinstance(age, int) and not isinstance(age, bool) else None,
        'gender': _normalize_gender(data.get('gender')),
        'language': _normalize_language(data.get('language')),
        'points': points if isinstance(points, int) and not isinstance(points, bool) else 0,
        'labels': _map_labels(data.get('labels')),
    }
    teacher = map_teacher_response(data.get('teacher'))
    if teacher:
        user['teacher'] = teacher
    return user


class CurrentUser:
    """Proxy object providing attribute access to the session's user dict."""

    def __init__(self, data=None):
        self._data = data or {}

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self._data.get(name)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    def __bool__(self):
        return bool(self._data)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def to_dict(self):
        return dict(self._data)

    @property
    def id(self):
        return self._data.get('id', '')

    @property
    def role(self):
        # no fallback here: a missing role must not pass a role gate
        return self._data.get('role')

    @property
    def initial(self):
        name = self._data.get('name') or ''
        return name[0].upper() if name else '?'

    def can(self, capability):
        return can(self.role, capability)

    def is_student(self):
        return self.role == Role.STUDENT.value

    def is_teacher(self):
        return self.role == Role.TEACHER.value

    def is_admin(self):
        return self.role == Role.ADMIN.value
