"""
Prometheus metrics definitions for object storage calls.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

storage_requests_total = Counter(
    'storage_requests_total',
    'Total object storage requests',
    ['operation']
)

storage_failures_total = Counter(
    'storage_failures_total',
    'Total object storage failures',
    ['operation']
)

storage_latency_seconds = Histogram(
    'storage_latency_seconds',
    'Object storage request latency in seconds',
    ['operation'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# direction: "upload" or "download"
storage_bytes_total = Counter(
    'storage_bytes_total',
    'Total payload bytes transferred',
    ['direction']
)
