import os
import logging
from academy import create_app
from config import Config, DevelopmentConfig

config_class = DevelopmentConfig if os.environ.get('FLASK_ENV') == 'development' else Config

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, config_class.LOG_LEVEL.upper(), logging.INFO),
)

app = create_app(config_class)

if __name__ == '__main__':
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() in ('true', '1')
    port = int(os.environ.get('PORT', 8080))
    app.run(host='0.0.0.0', port=port, debug=debug)
