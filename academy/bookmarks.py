import logging
import time

logger = logging.getLogger(__name__)

BOOKMARKS_KEY = 'bookmarkedItems'
ENROLLMENTS_KEY = 'enrolledItems'

CONTENT_TYPES = ('course', 'workshop', 'hackathon', 'tutorial')


def _now_ms():
    return int(time.time() * 1000)


def _load(storage, key):
    items = storage.get(key)
    if items is None:
        return []
    if not isinstance(items, list) or not all(isinstance(i, dict) and 'id' in i for i in items):
        logger.error('Failed to parse %s from storage, starting empty', key)
        return []
    return items


class BookmarkStore:
    """Saved and joined content for one client.

    Both collections are read from storage once, here; every mutation writes
    the whole collection back before returning.
    """

    def __init__(self, storage):
        self.storage = storage
        self.bookmarked_items = _load(storage, BOOKMARKS_KEY)
        self.enrolled_items = _load(storage, ENROLLMENTS_KEY)

    def _persist_bookmarks(self):
        self.storage.set(BOOKMARKS_KEY, self.bookmarked_items)

    def _persist_enrollments(self):
        self.storage.set(ENROLLMENTS_KEY, self.enrolled_items)

    def add(self, item):
        if self.is_bookmarked(item['id']):
            return False
        self.bookmarked_items.append({**item, 'bookmarkedAt': _now_ms()})
        self._persist_bookmarks()
        return True

    def remove(self, item_id):
        self.bookmarked_items = [i for i in self.bookmarked_items if i['id'] != item_id]
        self._persist_bookmarks()

    def add_enrollment(self, item):
        if self.is_enrolled(item['id']):
            return False
        self.enrolled_items.append({**item, 'enrolledAt': _now_ms()})
        self._persist_enrollments()
        return True

    def is_bookmarked(self, item_id):
        return any(i['id'] == item_id for i in self.bookmarked_items)

    def is_enrolled(self, item_id):
        return any(i['id'] == item_id for i in self.enrolled_items)

    def clear_bookmarks(self):
        self.bookmarked_items = []
        self.storage.remove(BOOKMARKS_KEY)

    def clear_enrollments(self):
        self.enrolled_items = []
        self.storage.remove(ENROLLMENTS_KEY)
