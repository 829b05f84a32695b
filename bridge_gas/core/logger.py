# /bridge_gas/core/logger.py
import logging
import structlog
from structlog.contextvars import bind_contextvars
import sentry_sdk
from prometheus_client import Counter, Gauge
from bridge_gas.core.config import settings

# --- Prometheus Metrics ---
GAS_PRICE_UPDATES = Counter(
    "bridge_gas_price_updates_total",
    "Gas price resolution cycles by the source that produced the price",
    ["chain_side", "source"],
)
GAS_PRICE_FETCH_FAILURES = Counter(
    "bridge_gas_price_fetch_failures_total",
    "Failed gas price lookups by resolution stage",
    ["chain_side", "stage"],
)
CURRENT_GAS_PRICE = Gauge("bridge_gas_price_wei", "Most recently cached gas price in wei", ["chain_side"])
CYCLES_SKIPPED = Counter(
    "bridge_gas_price_cycles_skipped_total",
    "Scheduled cycles dropped because the previous cycle was still running",
    ["task"],
)
ERRORS_LOGGED = Counter("bridge_gas_errors_logged_total", "Total number of errors logged", ["level"])


def count_errors(logger, method_name: str, event_dict: dict) -> dict:
    """Structlog processor feeding ERRORS_LOGGED for error and critical events."""
    if method_name in ("error", "critical", "exception"):
        ERRORS_LOGGED.labels(method_name).inc()
    return event_dict


def configure_logging():
    if settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN.get_secret_value(), traces_sample_rate=1.0)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            count_errors,
            structlog.processors.JSONRenderer(), # Production-ready JSON logs
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(settings.LOG_LEVEL)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

def get_logger(name: str):
    return structlog.get_logger(name)

def bind_chain_side(chain_side: str):
    # contextvars are task-local, so home and foreign cycles keep separate bindings
    bind_contextvars(chain_side=chain_side)

configure_logging()
log = get_logger("BridgeGas.System")
