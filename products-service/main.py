import os
import time
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from dotenv import load_dotenv
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import create_db_engine, init_db
from errors import AppError, ErrorKind, classify_error, translate_error
from routes import router as products_router

# Chargement des variables d'environnement
load_dotenv()

SERVICE_NAME = "products-service"

# Config logging JSON (niveaux INFO, WARNING, ERROR)
logger.remove()
logger.add(
    sink=os.getenv("LOG_FILE", "logs.json"),
    format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {message} | {extra}",
    level=os.getenv("LOG_LEVEL", "INFO"),
    serialize=True,
    rotation="1 day",
)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "endpoint"]
)
ERROR_COUNT = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["service", "endpoint", "error_type"]
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Engine créé au démarrage, libéré à l'arrêt
    engine = create_db_engine()
    init_db(engine)
    app.state.engine = engine
    yield
    engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(title="Products Service", lifespan=lifespan)


def endpoint_label(request: Request) -> str:
    """Gabarit de la route (ex. /{product_id}) plutôt que le chemin brut."""
    route = request.scope.get("route")
    return route.path if route is not None else "unmatched"


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Seul endroit qui produit une réponse d'erreur visible par le client."""
    kind = classify_error(exc)
    status_code, body = translate_error(exc)
    if kind is ErrorKind.UNEXPECTED:
        logger.opt(exception=exc).error(f"Unexpected error on {request.method} {request.url.path}")
    else:
        logger.bind(error_type=kind.value, status=status_code).warning(
            f"Request failed: {body['message']}"
        )
    ERROR_COUNT.labels(service=SERVICE_NAME, endpoint=endpoint_label(request), error_type=kind.value).inc()
    return JSONResponse(status_code=status_code, content=body)


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


for error_class in (AppError, StarletteHTTPException, RequestValidationError, ValidationError):
    app.add_exception_handler(error_class, handle_error)


# Middleware pour logger les requests avec correlation ID
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Generate or propagate correlation ID (trace-id)
    trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
    start_time = time.time()

    # Bind trace_id to logger context
    with logger.contextualize(trace_id=trace_id, service=SERVICE_NAME):
        logger.bind(method=request.method, url=str(request.url)).info(
            f"Request: {request.method} {request.url.path}"
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            # Erreurs inattendues: traduites ici, jamais propagées au serveur
            response = error_response(request, exc)

        # Calculate latency
        latency = time.time() - start_time

        # Record metrics
        REQUEST_COUNT.labels(
            service=SERVICE_NAME,
            method=request.method,
            endpoint=endpoint_label(request),
            status=response.status_code
        ).inc()
        REQUEST_LATENCY.labels(
            service=SERVICE_NAME,
            method=request.method,
            endpoint=endpoint_label(request)
        ).observe(latency)

        logger.bind(status=response.status_code, latency=latency).info(
            f"Response status: {response.status_code}"
        )

        # Add trace_id to response headers for tracing
        response.headers["X-Trace-ID"] = trace_id
        return response


@app.get("/metrics")
async def metrics():
    """Endpoint /metrics compatible Prometheus"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy", "service": SERVICE_NAME}


app.include_router(products_router)


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8001))
    logger.info(f"Starting Products Service on port {port}")
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=port)
