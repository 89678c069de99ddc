"""Global pytest configuration."""

import os

# Tests never call OpenAI; force the stub client before any settings are cached
os.environ["OPENAI_API_KEY"] = ""
