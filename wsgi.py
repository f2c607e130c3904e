from teamlogs import create_app

# Entry point for WSGI servers, e.g.: gunicorn --bind 0.0.0.0:5000 wsgi:application
application = create_app()
