from urllib.parse import quote

DEFAULT_BASE_URL = 'https://storage.example.com'


def build_storage_url(path, base_url=DEFAULT_BASE_URL):
    """Return the public URL an object at ``path`` would be served from.

    Nothing is uploaded: files are not kept anywhere yet, so these URLs are
    placeholders derived from the file name.
    """
    return f'{base_url.rstrip("/")}/{path}'


def video_url(filename, base_url=DEFAULT_BASE_URL):
    return build_storage_url(f'videos/{quote(filename)}', base_url)


def thumbnail_url(filename, base_url=DEFAULT_BASE_URL):
    return build_storage_url(f'thumbnails/{quote(filename)}', base_url)
