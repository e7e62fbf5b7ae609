# wsgi.py
from dotenv import load_dotenv; load_dotenv()

from articlehub import create_app

application = create_app()
app = application

if __name__ == "__main__":
    import os
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5010)), debug=True)
