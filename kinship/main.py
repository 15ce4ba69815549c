import os
import time
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from .routes import router
from .core import redis_startup, init_metrics, shutdown_connections, HTTP_REQUESTS, HTTP_LATENCY
from .models import create_all
from .file_storage import UPLOAD_DIR, PUBLIC_PREFIX
import logging
from pythonjsonlogger import jsonlogger

# setup structured logging
logger = logging.getLogger('kinship')
handler = logging.StreamHandler()
formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())

app = FastAPI(title="Kinship API", version="0.1.0")

cors_origins = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(router, prefix="/api")

os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="friend_photos")

@app.get('/healthz')
async def healthz():
    return {'status': 'ok'}

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={'message': 'Invalid request data', 'errors': jsonable_encoder(exc.errors())},
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={'message': exc.detail},
        headers=getattr(exc, 'headers', None),
    )

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception({'msg': 'unhandled_error', 'path': request.url.path, 'error': str(exc)})
    return JSONResponse(status_code=500, content={'message': 'Internal server error'})

@app.middleware('http')
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    logger.info({'msg': 'request_start', 'method': request.method, 'path': request.url.path})
    response = await call_next(request)
    duration = time.perf_counter() - start
    HTTP_REQUESTS.labels(method=request.method, status=str(response.status_code)).inc()
    HTTP_LATENCY.labels(method=request.method).observe(duration)
    logger.info({
        'msg': 'request_end',
        'method': request.method,
        'path': request.url.path,
        'status': response.status_code,
        'duration_ms': round(duration * 1000, 2),
    })
    return response

@app.on_event("startup")
async def startup():
    # redis and the metrics exporter degrade to disabled on failure
    await redis_startup()
    init_metrics()
    if os.getenv('AUTO_CREATE_TABLES', 'false').lower() in ('1', 'true', 'yes'):
        await create_all()
        logger.info({'msg': 'tables_created'})
    logger.info({'msg': 'startup_complete', 'upload_dir': UPLOAD_DIR})

@app.on_event("shutdown")
async def shutdown():
    await shutdown_connections()
