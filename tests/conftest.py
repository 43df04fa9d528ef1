import os

# Keep tests independent from whatever domain or login the developer has
os.environ.pop("DBOS_DOMAIN", None)
os.environ.pop("DBOS_CREDENTIALS_DIR", None)

from tests.fixtures import *  # noqa: E402,F401,F403
