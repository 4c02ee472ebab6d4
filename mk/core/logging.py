"""
CLI 로깅 설정.

- 진단 메시지는 logging으로 stderr 출력
- 사용자용 결과 메시지 (mk: created ...)는 CLI가 stdout으로 직접 출력
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """
    루트 로거 설정.

    Args:
        verbose: True면 DEBUG, 아니면 WARNING
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        force=True,
    )
