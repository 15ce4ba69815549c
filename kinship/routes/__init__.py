from fastapi import APIRouter
from .auth import router as auth_router
from .friends import router as friends_router
from .relationships import router as relationships_router
from .activities import router as activities_router
from .shares import router as shares_router
from .imports import router as imports_router
from .network import router as network_router
from .integrations import router as integrations_router

router = APIRouter()
router.include_router(auth_router, prefix='/auth', tags=['auth'])
router.include_router(friends_router, prefix='/friends', tags=['friends'])
router.include_router(relationships_router, prefix='/relationships', tags=['relationships'])
router.include_router(activities_router, tags=['activities'])
router.include_router(shares_router, prefix='/shares', tags=['shares'])
router.include_router(imports_router, prefix='/imports', tags=['imports'])
router.include_router(network_router, tags=['network'])
router.include_router(integrations_router, tags=['integrations'])
