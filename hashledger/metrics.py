"""
metrics.py - Prometheus metrics for the hashledger package.
"""

from prometheus_client import Counter, start_http_server

BLOCKS_APPENDED = Counter(
    'hashledger_blocks_appended_total', 'Total number of blocks appended to ledger pages'
)
PAGE_VERIFICATIONS = Counter(
    'hashledger_page_verifications_total', 'Ledger page verifications by result', ['result']
)
DECODE_ERRORS = Counter(
    'hashledger_decode_errors_total', 'Total number of malformed base64 hashes encountered'
)


def start_metrics_server(port: int = 8000, addr: str = '0.0.0.0') -> None:
    """
    Start an HTTP server to expose Prometheus metrics on /metrics.
    """
    start_http_server(port, addr=addr)
