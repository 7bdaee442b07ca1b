import os

os.environ.setdefault("SWE_OTEL_ENABLED", "false")
