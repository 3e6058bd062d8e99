from functools import wraps
import time

import grpc
from prometheus_client import Counter, Histogram

# Request Metrics
REQUEST_TOTAL = Counter(
    'csi_controller_requests_total',
    'Total number of CSI requests',
    ['method', 'code']
)

REQUEST_LATENCY = Histogram(
    'csi_controller_request_latency_seconds',
    'CSI request latency in seconds',
    ['method'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
)


class _RecordingContext:
    """Wraps a servicer context to remember the status code that was set"""

    def __init__(self, context):
        self._context = context
        self.code = grpc.StatusCode.OK

    def set_code(self, code):
        self.code = code
        self._context.set_code(code)

    def __getattr__(self, name):
        return getattr(self._context, name)


def measure_rpc(func):
    """Decorator to count an RPC by outcome and measure its duration"""
    @wraps(func)
    def wrapper(self, request, context):
        recording = _RecordingContext(context)
        start_time = time.time()
        try:
            return func(self, request, recording)
        finally:
            REQUEST_LATENCY.labels(method=func.__name__).observe(time.time() - start_time)
            REQUEST_TOTAL.labels(method=func.__name__, code=recording.code.name).inc()
    return wrapper
