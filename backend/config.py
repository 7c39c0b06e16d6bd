import os
from dotenv import load_dotenv

load_dotenv()

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017/youth_timesheets")

# Civil timezone for every date derivation; never the host's local zone.
COMPLIANCE_TIMEZONE = os.getenv("COMPLIANCE_TIMEZONE", "America/New_York")

COMPLIANCE_LOG_LEVEL = os.getenv("COMPLIANCE_LOG_LEVEL", "INFO")
