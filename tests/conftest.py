import os

# Console-only logging, no log files during tests
os.environ.setdefault("ENVIRONMENT", "testing")
