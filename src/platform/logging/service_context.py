"""
Service context for log lines.

Identifies which process of which deployment wrote a log line, so that
interleaved output from several box office workers can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'box-office')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers usually expose a short hostname; fall back to the PID locally
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
