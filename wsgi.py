"""
WSGI entry point for the LeadDesk API.

    gunicorn wsgi:app --worker-class gthread --threads 8

The SSE lead stream holds a worker thread per subscriber, hence threaded workers.
"""
import os

from leaddesk import create_app

app = create_app()

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 8080)), threaded=True)
