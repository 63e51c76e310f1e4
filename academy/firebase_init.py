import os
import firebase_admin
from firebase_admin import credentials, firestore

_app = None
_db = None


def init_firebase(app_config=None):
    global _app, _db

    if _app is not None:
        return

    cred_path = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS', './firebase-service-account.json')

    if os.path.exists(cred_path):
        cred = credentials.Certificate(cred_path)
    else:
        cred = credentials.ApplicationDefault()

    project_id = ''
    if app_config:
        project_id = app_config.get('FIREBASE_PROJECT_ID', '')
    if not project_id:
        project_id = os.environ.get('FIREBASE_PROJECT_ID', '')

    options = {'projectId': project_id} if project_id else None

    _app = firebase_admin.initialize_app(cred, options=options)
    _db = firestore.client()


def get_db():
    global _db
    if _db is None:
        init_firebase()
    return _db
