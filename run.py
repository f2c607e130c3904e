import os

from teamlogs import create_app

# Configuration is chosen from FLASK_ENV; config.py loads .env
app = create_app()

if __name__ == '__main__':
    # Flask's built-in server is for development only. Use Gunicorn in production.
    host = os.environ.get('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_RUN_PORT', 5000))
    app.run(host=host, port=port)
