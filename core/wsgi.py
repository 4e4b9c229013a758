from __future__ import annotations

import os
from pathlib import Path

from django.core.wsgi import get_wsgi_application
from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# deployments run on base settings; dev and test opt in explicitly
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.base")

application = get_wsgi_application()
