import os

# Metrics are exercised through the no-op collectors in tests
os.environ.setdefault("DISABLE_PROMETHEUS", "1")
