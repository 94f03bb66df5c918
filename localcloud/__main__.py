from __future__ import annotations

import uvicorn

from .config import settings


def run():
    uvicorn.run('localcloud.main:app', host=settings.app_host, port=settings.app_port, log_config=None)


if __name__ == '__main__':
    run()
