import time

from prometheus_client import Counter, Histogram

# Define metrics
game_starts_counter = Counter("jeopardy_game_starts_total", "Number of boards loaded for a new game")

board_load_failures_counter = Counter(
    "jeopardy_board_load_failures_total", "Number of failed board loads", ["reason"]
)  # 'provider', 'malformed', 'insufficient'

duplicate_load_requests_counter = Counter(
    "jeopardy_duplicate_load_requests_total", "Number of new game requests ignored while a load was running"
)

cell_reveals_counter = Counter("jeopardy_cell_reveals_total", "Number of cell reveal steps", ["showing"])  # 'question', 'answer'

board_load_latency = Histogram(
    "jeopardy_board_load_latency_seconds",
    "Time spent loading a complete board from the provider",
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, float("inf")),
)

provider_request_latency = Histogram(
    "jeopardy_provider_request_latency_seconds", "Trivia provider request latency in seconds", ["endpoint"]
)

provider_request_counter = Counter(
    "jeopardy_provider_requests_total", "Number of trivia provider requests", ["endpoint", "status"]
)

# API request latency
api_request_latency = Histogram("jeopardy_api_request_latency_seconds", "API request latency in seconds", ["endpoint"])

# API request counter
api_request_counter = Counter("jeopardy_api_requests_total", "Number of API requests", ["endpoint", "status"])


# Helper function to track API request latency
def track_request_latency(endpoint):
    start_time = time.time()

    def stop_timer(status="success"):
        latency = time.time() - start_time
        api_request_latency.labels(endpoint=endpoint).observe(latency)
        api_request_counter.labels(endpoint=endpoint, status=status).inc()

    return stop_timer


def record_provider_request(endpoint, latency, status):
    provider_request_latency.labels(endpoint=endpoint).observe(latency)
    provider_request_counter.labels(endpoint=endpoint, status=status).inc()


def record_game_start(load_seconds):
    game_starts_counter.inc()
    board_load_latency.observe(load_seconds)


def record_load_failure(reason):
    board_load_failures_counter.labels(reason=reason).inc()


def record_duplicate_load_request():
    duplicate_load_requests_counter.inc()


def record_cell_reveal(showing):
    cell_reveals_counter.labels(showing=showing).inc()
