import os

# Quiet logging and no log files while testing
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("RANK_WORKERS", "4")
