"""Script to automatically generate openapi json file."""

import json
from pathlib import Path

from fastapi.openapi.utils import get_openapi

from label_analyzer.core.config import Settings
from label_analyzer.factory import create_app


# Production disables /openapi.json, so build from a non-production app
app = create_app(Settings(APP_ENV="development"))

openapi_schema = get_openapi(
    title=app.title,
    version=app.version,
    description=app.description,
    routes=app.routes,
)

output = Path("docs/openapi.json")
output.parent.mkdir(parents=True, exist_ok=True)
with output.open("w") as f:
    json.dump(openapi_schema, f, indent=2)
