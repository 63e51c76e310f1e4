from flask import Flask
from flask_cors import CORS
from flask_wtf.csrf import CSRFProtect
from config import Config

csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    csrf.init_app(app)

    # Firestore is only needed when it backs client storage
    if app.config.get('STORAGE_BACKEND') == 'firestore':
        from academy.firebase_init import init_firebase
        init_firebase(app.config)

    # Identity strategy is fixed here, once, from DEV_MODE
    from academy.session import build_strategy
    from academy.services.identity import IdentityClient
    app.extensions['academy_identity_strategy'] = build_strategy(app.config.get('DEV_MODE', False))
    app.extensions['academy_identity_client'] = IdentityClient(
        app.config['IDENTITY_API_URL'],
        timeout=app.config.get('IDENTITY_API_TIMEOUT', 15),
    )

    from academy.video_store import VideoStore
    videos = VideoStore(upload_base_url=app.config.get('UPLOAD_BASE_URL'))
    if app.config.get('SEED_SAMPLE_VIDEOS'):
        videos.seed()
    app.extensions['academy_videos'] = videos

    allowed_origins = [origin.strip() for origin in app.config.get('CORS_ALLOWED_ORIGINS', '').split(',')
                       if origin.strip()]
    if allowed_origins:
        CORS(app, origins=allowed_origins, supports_credentials=True)

    from academy.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from academy.routes import auth, bookmarks, main, videos as video_routes
    for blueprint in (auth.bp, bookmarks.bp, video_routes.bp):
        csrf.exempt(blueprint)
    app.register_blueprint(main.bp)
    app.register_blueprint(auth.bp)
    app.register_blueprint(bookmarks.bp)
    app.register_blueprint(video_routes.bp)

    return app
