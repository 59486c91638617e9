import logfire
from pydantic_ai import models

logfire.configure(send_to_logfire=False, console=False)
models.ALLOW_MODEL_REQUESTS = False
