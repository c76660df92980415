"""
Service context tag attached to every log line.

Format: ``<service>@<env>:<instance>`` so lines from several API replicas and
the reminder job can be told apart in one log stream.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'lab-booking')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are long hashes, keep the first 8 chars
    hostname = os.getenv('HOSTNAME', '')
    instance = hostname[:8] if hostname else str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
