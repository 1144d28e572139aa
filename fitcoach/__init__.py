"""fitcoach: adaptive fitness coaching chat pipeline."""

from dotenv import load_dotenv

load_dotenv()
