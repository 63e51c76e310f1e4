"""
In-memory store of tutorial videos.

Records live in a process-local list and are lost on restart.  Every
record is a plain dict using the JSON field names the API returns.
"""

import itertools
import logging
from datetime import datetime, timezone

from academy.errors import NotFoundError, ValidationError
from academy.services.storage import DEFAULT_BASE_URL, video_url, thumbnail_url

logger = logging.getLogger(__name__)

MOCK_TEACHER = {'id': 'teacher-1', 'name': 'Mock Teacher'}

REQUIRED_FIELDS = ('title', 'description', 'videoUrl')
OPTIONAL_FIELDS = ('thumbnailUrl', 'duration', 'category')
UPDATABLE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS + (
    'teacherId', 'teacherName', 'views', 'likes', 'rating',
)

SAMPLE_VIDEOS = [
    {
        'title': "Python'a Giriş - Değişkenler ve Veri Tipleri",
        'description': 'Bu videoda Python programlama diline giriş yapıyoruz. '
                       'Değişkenler, veri tipleri ve temel operatörleri öğreniyoruz.',
        'videoUrl': 'https://www.youtube.com/watch?v=kqtD5dpn9C8',
        'duration': '15:30',
        'category': 'Python',
        'teacherId': 'teacher-1',
        'teacherName': 'Mehmet Hoca',
        'views': 245,
        'likes': 32,
        'rating': 4.8,
        'createdAt': '2024-01-15T00:00:00.000Z',
    },
    {
        'title': 'Web Geliştirme - HTML ve CSS Temelleri',
        'description': 'HTML ve CSS kullanarak modern web sayfaları oluşturmayı öğrenin. '
                       'Responsive tasarım ve flexbox konularını ele alıyoruz.',
        'videoUrl': 'https://www.youtube.com/watch?v=UB1O30fR-EE',
        'duration': '22:15',
        'category': 'Web Geliştirme',
        'teacherId': 'teacher-2',
        'teacherName': 'Ayşe Öğretmen',
        'views': 189,
        'likes': 28,
        'rating': 4.9,
        'createdAt': '2024-01-20T00:00:00.000Z',
    },
]


def _now():
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


class VideoStore:
    def __init__(self, upload_base_url=DEFAULT_BASE_URL, clock=_now):
        self.upload_base_url = upload_base_url
        self._clock = clock
        self._videos = []
        self._ids = itertools.count(1)

    def __len__(self):
        return len(self._videos)

    def seed(self, samples=SAMPLE_VIDEOS):
        for sample in samples:
            record = self._new_record(sample, None)
            record['createdAt'] = record['updatedAt'] = sample['createdAt']
            self._videos.append(record)

    def _new_record(self, fields, teacher):
        teacher = teacher or {}
        now = self._clock()
        return {
            'id': str(next(self._ids)),
            'title': fields['title'],
            'description': fields['description'],
            'videoUrl': fields['videoUrl'],
            'thumbnailUrl': fields.get('thumbnailUrl') or '',
            'duration': fields.get('duration') or '',
            'category': fields.get('category') or '',
            'teacherId': fields.get('teacherId') or teacher.get('id') or MOCK_TEACHER['id'],
            'teacherName': fields.get('teacherName') or teacher.get('name') or MOCK_TEACHER['name'],
            'views': fields.get('views', 0),
            'likes': fields.get('likes', 0),
            'rating': fields.get('rating', 0),
            'createdAt': now,
            'updatedAt': now,
        }

    def _index(self, video_id):
        for i, video in enumerate(self._videos):
            if video['id'] == str(video_id):
                return i
        raise NotFoundError('Video not found.')

    def list(self):
        """All videos, newest first."""
        return sorted(self._videos, key=lambda v: v['createdAt'], reverse=True)

    def get(self, video_id):
        return self._videos[self._index(video_id)]

    def create(self, fields, teacher=None):
        missing = [name for name in REQUIRED_FIELDS if _is_blank(fields.get(name))]
        if missing:
            logger.info('Rejected video without %s', ', '.join(missing))
            raise ValidationError('Title, description and video URL are required.')

        accepted = {k: fields[k] for k in REQUIRED_FIELDS + OPTIONAL_FIELDS if k in fields}
        record = self._new_record(accepted, teacher)
        self._videos.append(record)
        logger.info('Created video %s', record['id'])
        return record

    def update(self, video_id, fields):
        index = self._index(video_id)
        current = self._videos[index]
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        # ISO strings in one format order chronologically
        updated = {**current, **changes, 'updatedAt': max(self._clock(), current['updatedAt'])}
        self._videos[index] = updated
        return updated

    def delete(self, video_id):
        index = self._index(video_id)
        removed = self._videos.pop(index)
        logger.info('Deleted video %s', removed['id'])
        return removed

    def upload_create(self, fields, video_file, thumbnail_file=None, teacher=None):
        if _is_blank(fields.get('title')) or _is_blank(fields.get('description')):
            raise ValidationError('Title and description are required.')
        if video_file is None or not getattr(video_file, 'filename', None):
            raise ValidationError('A video file is required.')

        thumbnail = ''
        if thumbnail_file is not None and getattr(thumbnail_file, 'filename', None):
            thumbnail = thumbnail_url(thumbnail_file.filename, self.upload_base_url)

        return self.create({
            'title': fields['title'],
            'description': fields['description'],
            'duration': fields.get('duration') or '',
            'videoUrl': video_url(video_file.filename, self.upload_base_url),
            'thumbnailUrl': thumbnail,
        }, teacher=teacher)
