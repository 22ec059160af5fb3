"""Application entrypoint"""
import os
from dotenv import load_dotenv

# Load .env
load_dotenv()

from config import get_config
from studyguide import create_app

# Create the app instance
app = create_app(os.environ.get('FLASK_CONFIG') or 'default')

if __name__ == '__main__':
    app.run(debug=True, port=get_config().runtime.port)
